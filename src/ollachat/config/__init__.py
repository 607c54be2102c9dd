"""設定管理モジュール"""

from ollachat.config.loader import (
    ConfigError,
    ConfigValidationError,
    EnvironmentVariableError,
    expand_env_vars,
    load_config,
    parse_config,
)
from ollachat.config.models import (
    DEFAULT_ENDPOINT_BASE_URL,
    DEFAULT_MODEL_NAME,
    Config,
    LoggingConfig,
    ModelConfig,
    PersonaConfig,
    ServerConfig,
    StorageConfig,
    WorkspaceConfig,
)

__all__ = [
    "Config",
    "ConfigError",
    "ConfigValidationError",
    "DEFAULT_ENDPOINT_BASE_URL",
    "DEFAULT_MODEL_NAME",
    "EnvironmentVariableError",
    "LoggingConfig",
    "ModelConfig",
    "PersonaConfig",
    "ServerConfig",
    "StorageConfig",
    "WorkspaceConfig",
    "expand_env_vars",
    "load_config",
    "parse_config",
]
