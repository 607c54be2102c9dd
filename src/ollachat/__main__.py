"""アプリケーションのエントリポイント"""

import argparse
import asyncio
import logging
import signal
import sys
from pathlib import Path

from ollachat.application.services import (
    ContextAssembler,
    ConversationStore,
    FileContextCache,
)
from ollachat.application.session import ModelSettings, Session
from ollachat.application.use_cases import RequestOrchestrator, wrap_prompt
from ollachat.config import Config, ConfigError, LoggingConfig, load_config
from ollachat.domain.entities import ContextOptions
from ollachat.infrastructure.http import BridgeServer
from ollachat.infrastructure.llm import GenerationClient, GenerationError
from ollachat.infrastructure.persistence import (
    DatabaseManager,
    PersistenceError,
    SQLiteConversationRepository,
)
from ollachat.infrastructure.terminal import ShellCommandRunner
from ollachat.infrastructure.workspace import (
    EditorStateHolder,
    WorkspaceFileLister,
    WorkspaceFileReader,
)
from ollachat.presentation import PresentationBridge, Sender

# Default logging for early startup
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config.yaml"
COMMAND_SHUTDOWN_TIMEOUT_SECONDS = 5.0


def configure_logging(config: LoggingConfig | None) -> None:
    """Configure logging based on config.

    Args:
        config: Logging configuration. If None, uses defaults.
    """
    if config is None:
        return

    # Get root logger
    root_logger = logging.getLogger()

    # Set root level
    level = getattr(logging, config.level.upper(), logging.INFO)
    root_logger.setLevel(level)

    # Update handler format if specified
    if root_logger.handlers:
        formatter = logging.Formatter(config.format)
        for handler in root_logger.handlers:
            handler.setFormatter(formatter)

    # Configure individual loggers
    if config.loggers:
        for logger_name, logger_level in config.loggers.items():
            individual_logger = logging.getLogger(logger_name)
            individual_level = getattr(logging, logger_level.upper(), logging.INFO)
            individual_logger.setLevel(individual_level)
            logger.debug(
                "Set logger '%s' to level %s", logger_name, logger_level.upper()
            )


def read_config(path: str | Path) -> Config:
    """設定を読み込む（ファイルがなければ既定値）

    Args:
        path: config.yaml のパス

    Returns:
        Config オブジェクト

    Raises:
        ConfigError: 設定値が不正
    """
    config_path = Path(path)
    if not config_path.exists():
        logger.info("%s not found, using default settings", config_path)
        return Config()
    return load_config(config_path)


def create_generation_client(config: Config) -> GenerationClient:
    debug_llm_messages = bool(config.logging and config.logging.debug_llm_messages)
    return GenerationClient(
        config.persona.system_prompt,
        debug_llm_messages=debug_llm_messages,
    )


async def serve(config: Config) -> None:
    """チャットパネル用のサーバーを起動する"""
    # Initialize database
    db_manager = DatabaseManager(config.storage.database_path)
    await db_manager.create_tables()

    # Build dependencies
    conversation_store = ConversationStore(
        SQLiteConversationRepository(db_manager.get_session)
    )
    await conversation_store.load()

    session = Session(settings=ModelSettings(config.model))
    workspace_root = Path(config.workspace.root)
    editor_state = EditorStateHolder()
    context_assembler = ContextAssembler(
        editor_source=editor_state,
        file_reader=WorkspaceFileReader(workspace_root),
        file_cache=session.file_cache,
    )
    orchestrator = RequestOrchestrator(
        session=session,
        conversation_store=conversation_store,
        context_assembler=context_assembler,
        text_generator=create_generation_client(config),
    )
    file_lister = WorkspaceFileLister(
        workspace_root,
        exclude=config.workspace.exclude,
        max_files=config.workspace.max_files,
    )
    command_runner = ShellCommandRunner(workspace_root)

    def create_bridge(send: Sender) -> PresentationBridge:
        return PresentationBridge(
            send=send,
            conversation_store=conversation_store,
            orchestrator=orchestrator,
            file_lister=file_lister,
            command_runner=command_runner,
            editor_state=editor_state,
            settings=session.settings,
        )

    server = BridgeServer(
        create_bridge,
        db_manager,
        host=config.server.host,
        port=config.server.port,
    )
    await server.start()
    logger.info(
        "Using model %s at %s",
        session.settings.model_name,
        session.settings.endpoint_base_url,
    )

    # Setup signal handlers for graceful shutdown
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()

    def shutdown_handler() -> None:
        logger.info("Received shutdown signal...")
        stop_event.set()

    loop.add_signal_handler(signal.SIGINT, shutdown_handler)
    loop.add_signal_handler(signal.SIGTERM, shutdown_handler)

    # Wait for shutdown signal
    await stop_event.wait()

    await shutdown(server, command_runner, db_manager)


async def shutdown(
    server: BridgeServer,
    command_runner: ShellCommandRunner,
    db_manager: DatabaseManager,
) -> None:
    """Stop serving, then release command watchers and the database."""
    logger.info("Shutting down...")
    await server.stop()
    await command_runner.wait_all(timeout=COMMAND_SHUTDOWN_TIMEOUT_SECONDS)
    await db_manager.close()
    logger.info("Shutdown complete")

async def ask_once(config: Config, question: str, files: list[str]) -> int:
    """一度だけ質問して返答を標準出力に書く

    スレッドには保存しない。

    Args:
        config: アプリケーション設定
        question: 質問文
        files: コンテキストに含めるファイル

    Returns:
        終了ステータス
    """
    context_assembler = ContextAssembler(
        editor_source=EditorStateHolder(),
        file_reader=WorkspaceFileReader(Path(config.workspace.root)),
        file_cache=FileContextCache(),
    )
    context = await context_assembler.build_context(
        ContextOptions(selected_files=tuple(files))
    )
    client = create_generation_client(config)
    try:
        reply = await client.generate(wrap_prompt(question, context), config.model)
    except GenerationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(reply)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ollachat",
        description="Editor chat assistant backed by a local text-generation service",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to config file (default: {DEFAULT_CONFIG_PATH})",
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("serve", help="Start the chat panel server (default)")

    ask_parser = subparsers.add_parser("ask", help="Ask a single question")
    ask_parser.add_argument(
        "question", nargs="?", help="Question text (read from stdin if omitted)"
    )
    ask_parser.add_argument(
        "-f",
        "--file",
        action="append",
        default=[],
        dest="files",
        help="Workspace file to include as context (repeatable)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse arguments and run the selected command."""
    args = build_parser().parse_args(argv)

    try:
        config = read_config(args.config)
    except ConfigError as e:
        logger.error("Failed to load config: %s", e)
        return 1

    # Apply logging configuration
    configure_logging(config.logging)

    if args.command == "ask":
        question = args.question or sys.stdin.read()
        if not question.strip():
            logger.error("No question given")
            return 1
        return asyncio.run(ask_once(config, question.strip(), args.files))

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    except PersistenceError as e:
        logger.error("Failed to load conversations: %s", e)
        return 1
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
