"""YAML設定ファイルの読み込みと環境変数展開"""

import os
import re
from pathlib import Path
from typing import Any

import yaml

from ollachat.config.models import (
    DEFAULT_LOG_FORMAT,
    Config,
    LoggingConfig,
    ModelConfig,
    PersonaConfig,
    ServerConfig,
    StorageConfig,
    WorkspaceConfig,
)


class ConfigError(Exception):
    """設定関連の基底例外"""


class ConfigValidationError(ConfigError):
    """設定値のバリデーションエラー"""


class EnvironmentVariableError(ConfigError):
    """環境変数が見つからないエラー"""


# 環境変数パターン: ${VAR_NAME}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")


def expand_env_vars(value: str) -> str:
    """文字列中の ${VAR_NAME} を環境変数の値に置換する

    Args:
        value: 置換対象の文字列

    Returns:
        環境変数が展開された文字列

    Raises:
        EnvironmentVariableError: 環境変数が未設定
    """
    if not value:
        return value

    def replace_var(match: re.Match[str]) -> str:
        var_name = match.group(1)
        env_value = os.environ.get(var_name)
        if env_value is None:
            raise EnvironmentVariableError(
                f"Environment variable '{var_name}' is not set"
            )
        return env_value

    return ENV_VAR_PATTERN.sub(replace_var, value)


def _expand_recursive(data: Any) -> Any:
    """データ構造を再帰的に走査し、文字列中の環境変数を展開する"""
    if isinstance(data, dict):
        return {key: _expand_recursive(value) for key, value in data.items()}
    elif isinstance(data, list):
        return [_expand_recursive(item) for item in data]
    elif isinstance(data, str):
        return expand_env_vars(data)
    else:
        return data


def _get_section(data: dict[str, Any], name: str) -> dict[str, Any]:
    """任意セクションを取得する

    Args:
        data: ルートの設定 dict
        name: セクション名

    Returns:
        セクションの dict（未指定なら空 dict）

    Raises:
        ConfigValidationError: セクションが mapping でない
    """
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigValidationError(f"Section '{name}' must be a mapping")
    return section


def _get_typed(
    data: dict[str, Any],
    field: str,
    expected: type | tuple[type, ...],
    default: Any,
    parent: str,
) -> Any:
    """型を検証しながらフィールドを取得する

    Args:
        data: セクションの dict
        field: フィールド名
        expected: 許容する型
        default: 未指定時の値
        parent: 親セクション名（エラーメッセージ用）

    Returns:
        フィールドの値

    Raises:
        ConfigValidationError: 型が一致しない
    """
    value = data.get(field)
    if value is None:
        return default
    # bool は int のサブクラスなので明示的に弾く
    if isinstance(value, bool) and bool not in _as_tuple(expected):
        raise ConfigValidationError(f"Field '{parent}.{field}' has invalid type")
    if not isinstance(value, expected):
        raise ConfigValidationError(f"Field '{parent}.{field}' has invalid type")
    return value


def _as_tuple(expected: type | tuple[type, ...]) -> tuple[type, ...]:
    return expected if isinstance(expected, tuple) else (expected,)


def _parse_string_list(
    data: dict[str, Any], field: str, default: list[str], parent: str
) -> list[str]:
    value = _get_typed(data, field, list, default, parent)
    if not all(isinstance(item, str) for item in value):
        raise ConfigValidationError(
            f"Field '{parent}.{field}' must be a list of strings"
        )
    return list(value)


def parse_config(raw_data: dict[str, Any] | None) -> Config:
    """設定 dict から Config を組み立てる

    Args:
        raw_data: YAML から読み込んだ dict（None なら全て既定値）

    Returns:
        Config オブジェクト

    Raises:
        ConfigValidationError: 設定値が不正
        EnvironmentVariableError: 環境変数が未設定
    """
    if raw_data is None:
        return Config()
    if not isinstance(raw_data, dict):
        raise ConfigValidationError("Config root must be a mapping")

    # 環境変数を展開
    data = _expand_recursive(raw_data)

    model_data = _get_section(data, "model")
    defaults = ModelConfig()
    model = ModelConfig(
        endpoint_base_url=_get_typed(
            model_data, "endpoint_base_url", str, defaults.endpoint_base_url, "model"
        ),
        model_name=_get_typed(
            model_data, "model_name", str, defaults.model_name, "model"
        ),
        request_timeout_seconds=float(
            _get_typed(
                model_data,
                "request_timeout_seconds",
                (int, float),
                defaults.request_timeout_seconds,
                "model",
            )
        ),
    )

    persona_data = _get_section(data, "persona")
    persona = PersonaConfig(
        system_prompt=_get_typed(persona_data, "system_prompt", str, None, "persona"),
    )

    storage_data = _get_section(data, "storage")
    storage = StorageConfig(
        database_path=_get_typed(
            storage_data, "database_path", str, StorageConfig().database_path, "storage"
        ),
    )

    workspace_data = _get_section(data, "workspace")
    workspace_defaults = WorkspaceConfig()
    workspace = WorkspaceConfig(
        root=_get_typed(
            workspace_data, "root", str, workspace_defaults.root, "workspace"
        ),
        exclude=_parse_string_list(
            workspace_data, "exclude", workspace_defaults.exclude, "workspace"
        ),
        max_files=_get_typed(
            workspace_data, "max_files", int, workspace_defaults.max_files, "workspace"
        ),
    )

    server_data = _get_section(data, "server")
    server_defaults = ServerConfig()
    server = ServerConfig(
        host=_get_typed(server_data, "host", str, server_defaults.host, "server"),
        port=_get_typed(server_data, "port", int, server_defaults.port, "server"),
    )

    # LoggingConfig (optional)
    logging_config: LoggingConfig | None = None
    logging_data = _get_section(data, "logging")
    if logging_data:
        loggers = _get_typed(logging_data, "loggers", dict, None, "logging")
        logging_config = LoggingConfig(
            level=_get_typed(logging_data, "level", str, "INFO", "logging"),
            format=_get_typed(
                logging_data, "format", str, DEFAULT_LOG_FORMAT, "logging"
            ),
            loggers=loggers,
            debug_llm_messages=_get_typed(
                logging_data, "debug_llm_messages", bool, False, "logging"
            ),
        )

    return Config(
        model=model,
        persona=persona,
        storage=storage,
        workspace=workspace,
        server=server,
        logging=logging_config,
    )


def load_config(path: str | Path) -> Config:
    """設定ファイルを読み込む

    Args:
        path: config.yaml のパス

    Returns:
        Config オブジェクト

    Raises:
        FileNotFoundError: ファイルが存在しない
        ConfigValidationError: 設定値が不正
        EnvironmentVariableError: 環境変数が未設定
        yaml.YAMLError: YAML構文エラー
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        raw_data = yaml.safe_load(f)

    return parse_config(raw_data)
