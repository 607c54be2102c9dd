"""SQLite database lifecycle for the conversation store."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# Import models to register them with SQLModel metadata
from ollachat.infrastructure.persistence import models as _models  # noqa: F401

logger = logging.getLogger(__name__)

MEMORY_DATABASE = ":memory:"


def build_database_url(database_path: str) -> str:
    """aiosqlite 用の接続 URL を組み立てる

    Args:
        database_path: SQLite ファイルのパス、または ":memory:"

    Returns:
        SQLAlchemy の接続 URL
    """
    if database_path == MEMORY_DATABASE:
        return f"sqlite+aiosqlite:///{MEMORY_DATABASE}"
    return f"sqlite+aiosqlite:///{database_path}"


class DatabaseManager:
    """会話ストア用 SQLite データベースの管理

    エンジンは最初の利用時に生成し、プロセス終了時に close() で破棄する。
    スレッド一覧は kv_store テーブルの 1 レコードとして保存される。
    """

    def __init__(self, database_path: str) -> None:
        """初期化

        Args:
            database_path: SQLite データベースファイルのパス
                          ":memory:" を指定するとインメモリDBを使用
        """
        self._database_path = database_path
        self._engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def database_path(self) -> str:
        return self._database_path

    def get_engine(self) -> AsyncEngine:
        """非同期エンジンを取得する（初回のみ生成）

        ファイル DB の場合は親ディレクトリを作成する。

        Returns:
            AsyncEngine インスタンス
        """
        if self._engine is None:
            if self._database_path != MEMORY_DATABASE:
                Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_async_engine(build_database_url(self._database_path))
            self._session_factory = async_sessionmaker(
                self._engine, class_=AsyncSession, expire_on_commit=False
            )
            logger.debug("Opened database %s", self._database_path)
        return self._engine

    async def create_tables(self) -> None:
        """未作成のテーブルを作成する"""
        async with self.get_engine().begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    @asynccontextmanager
    async def get_session(self) -> AsyncGenerator[AsyncSession, None]:
        """リポジトリ用のセッションを払い出す

        Yields:
            AsyncSession インスタンス
        """
        self.get_engine()
        assert self._session_factory is not None
        async with self._session_factory() as session:
            yield session

    async def is_healthy(self) -> bool:
        """データベースに接続できるか確認する

        Returns:
            接続できれば True
        """
        try:
            async with self.get_engine().connect() as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except Exception:
            logger.exception("Database health check failed")
            return False

    async def close(self) -> None:
        """エンジンを破棄する"""
        if self._engine is not None:
            await self._engine.dispose()
            self._engine = None
            self._session_factory = None
