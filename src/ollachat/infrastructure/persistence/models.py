"""SQLModel table definitions."""

from datetime import datetime, timezone

from sqlmodel import Field, SQLModel


class KeyValueModel(SQLModel, table=True):
    """キー・バリューテーブル

    value には JSON 文字列を格納する。
    """

    __tablename__ = "kv_store"

    id: int | None = Field(default=None, primary_key=True)
    key: str = Field(unique=True, index=True)
    value: str
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
