"""Persistence-related exceptions."""


class PersistenceError(Exception):
    """永続化処理の基底例外"""


class DatabaseError(PersistenceError):
    """SQLite への読み書きに失敗した場合に発生する例外"""


class CorruptConversationsError(PersistenceError):
    """保存済みのスレッド一覧をデコードできない場合に発生する例外

    起動時に発生した場合は既存データを上書きしないよう処理を中断する。
    """

    def __init__(self, key: str, reason: str) -> None:
        """初期化

        Args:
            key: 壊れていたレコードのキー
            reason: デコード失敗の理由
        """
        self.key = key
        super().__init__(
            f"Stored conversations under '{key}' are corrupt: {reason}"
        )
