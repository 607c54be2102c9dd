"""Conversation repository protocol."""

from typing import Protocol

from ollachat.domain.entities import Thread


class ConversationRepository(Protocol):
    """会話コレクションリポジトリの抽象インターフェース

    スレッドの一覧を一つの単位として保存・取得し、
    永続化層の実装詳細を隠蔽する。
    """

    async def load(self) -> list[Thread]:
        """保存済みのスレッド一覧を取得する

        Returns:
            スレッドリスト（新しい順）。未保存の場合は空リスト
        """
        ...

    async def save(self, threads: list[Thread]) -> None:
        """スレッド一覧全体を保存する

        差分ではなく、コレクション全体で既存の内容を置き換える。

        Args:
            threads: スレッドリスト（新しい順）
        """
        ...
