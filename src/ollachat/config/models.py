"""設定データクラス"""

from dataclasses import dataclass, field

DEFAULT_ENDPOINT_BASE_URL = "http://localhost:11434"
DEFAULT_MODEL_NAME = "llama2"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ModelConfig:
    """生成バックエンド設定"""

    endpoint_base_url: str = DEFAULT_ENDPOINT_BASE_URL
    model_name: str = DEFAULT_MODEL_NAME
    request_timeout_seconds: float = 300.0


@dataclass
class PersonaConfig:
    """ペルソナ設定

    Attributes:
        system_prompt: システムプリアンブルの上書き（None なら組み込みの文面）
    """

    system_prompt: str | None = None


@dataclass
class StorageConfig:
    """永続化設定"""

    database_path: str = "./data/ollachat.db"


@dataclass
class WorkspaceConfig:
    """ワークスペース設定

    Attributes:
        root: ワークスペースのルートディレクトリ
        exclude: 列挙から除外するディレクトリ名・パターン
        max_files: getFiles で返す最大件数
    """

    root: str = "."
    exclude: list[str] = field(default_factory=lambda: ["node_modules", ".git"])
    max_files: int = 5000


@dataclass
class ServerConfig:
    """WebSocket サーバー設定"""

    host: str = "127.0.0.1"
    port: int = 8765


@dataclass
class LoggingConfig:
    """ログ設定"""

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    loggers: dict[str, str] | None = None
    debug_llm_messages: bool = False


@dataclass
class Config:
    """アプリケーション設定"""

    model: ModelConfig = field(default_factory=ModelConfig)
    persona: PersonaConfig = field(default_factory=PersonaConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    workspace: WorkspaceConfig = field(default_factory=WorkspaceConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    logging: LoggingConfig | None = None
