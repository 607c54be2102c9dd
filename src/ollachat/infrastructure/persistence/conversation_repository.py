"""SQLite implementation of ConversationRepository."""

import json
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ollachat.domain.entities import Message, Thread
from ollachat.infrastructure.persistence.datetime_utils import (
    normalize_to_utc,
    parse_timestamp,
)
from ollachat.infrastructure.persistence.exceptions import (
    CorruptConversationsError,
    DatabaseError,
)
from ollachat.infrastructure.persistence.models import KeyValueModel

CONVERSATIONS_KEY = "conversations"


class SQLiteConversationRepository:
    """SQLite 版 ConversationRepository 実装

    スレッド一覧全体を JSON 文書として kv_store テーブルの
    固定キーに保存する。差分更新は行わない。
    """

    def __init__(
        self,
        session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]],
        key: str = CONVERSATIONS_KEY,
    ) -> None:
        """初期化

        Args:
            session_factory: 非同期セッション生成関数
            key: 保存先のキー
        """
        self._session_factory = session_factory
        self._key = key

    async def load(self) -> list[Thread]:
        """保存済みのスレッド一覧を取得する

        Returns:
            スレッドリスト（新しい順）。未保存の場合は空リスト

        Raises:
            DatabaseError: 読み込みに失敗
            CorruptConversationsError: 保存内容をデコードできない
        """
        try:
            async with self._session_factory() as session:
                result = await session.exec(
                    select(KeyValueModel).where(KeyValueModel.key == self._key)
                )
                model = result.first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load conversations: {e}") from e

        if model is None:
            return []

        try:
            records = json.loads(model.value)
            return [self._to_entity(record) for record in records]
        except (ValueError, KeyError, TypeError) as e:
            raise CorruptConversationsError(self._key, str(e)) from e

    async def save(self, threads: list[Thread]) -> None:
        """スレッド一覧全体を保存する（upsert）

        Args:
            threads: スレッドリスト（新しい順）

        Raises:
            DatabaseError: 書き込みに失敗
        """
        value = json.dumps([self._to_record(t) for t in threads], ensure_ascii=False)

        try:
            async with self._session_factory() as session:
                result = await session.exec(
                    select(KeyValueModel).where(KeyValueModel.key == self._key)
                )
                existing = result.first()

                if existing:
                    # 更新
                    existing.value = value
                    existing.updated_at = datetime.now(timezone.utc)
                    session.add(existing)
                else:
                    # 新規作成
                    session.add(KeyValueModel(key=self._key, value=value))

                await session.commit()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to save conversations: {e}") from e

    def _to_entity(self, record: dict[str, Any]) -> Thread:
        """JSON レコードをエンティティに変換する

        Args:
            record: スレッドの dict

        Returns:
            Thread エンティティ
        """
        messages = [
            Message(
                content=m["content"],
                is_user=bool(m["isUser"]),
                timestamp=parse_timestamp(m["timestamp"]),
            )
            for m in record.get("messages", [])
        ]
        return Thread(
            id=record["id"],
            title=record["title"],
            messages=messages,
            created_at=parse_timestamp(record["createdAt"]),
        )

    def _to_record(self, entity: Thread) -> dict[str, Any]:
        """エンティティを JSON レコードに変換する

        Args:
            entity: Thread エンティティ

        Returns:
            スレッドの dict
        """
        return {
            "id": entity.id,
            "title": entity.title,
            "messages": [
                {
                    "content": m.content,
                    "isUser": m.is_user,
                    "timestamp": normalize_to_utc(m.timestamp).isoformat(),
                }
                for m in entity.messages
            ],
            "createdAt": normalize_to_utc(entity.created_at).isoformat(),
        }
