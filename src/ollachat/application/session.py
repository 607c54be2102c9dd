"""Assistant session state."""

import dataclasses
import logging
from dataclasses import dataclass, field

from ollachat.application.services.file_context_cache import FileContextCache
from ollachat.config import ModelConfig

logger = logging.getLogger(__name__)

# Setting keys accepted by ModelSettings.update (camelCase and snake_case)
_SETTING_KEYS = {
    "endpointBaseUrl": "endpoint_base_url",
    "endpoint_base_url": "endpoint_base_url",
    "modelName": "model_name",
    "model_name": "model_name",
}


class ModelSettings:
    """Runtime-mutable backend settings.

    Wraps a ModelConfig so that the endpoint and the model name can be
    changed by a settings-style key write while the session is running.
    """

    def __init__(self, config: ModelConfig | None = None) -> None:
        """Initialize the settings.

        Args:
            config: Initial configuration. Defaults are used if None.
        """
        self._config = dataclasses.replace(config) if config else ModelConfig()

    @property
    def endpoint_base_url(self) -> str:
        return self._config.endpoint_base_url

    @property
    def model_name(self) -> str:
        return self._config.model_name

    def snapshot(self) -> ModelConfig:
        """Get a copy of the current configuration for one request."""
        return dataclasses.replace(self._config)

    def update(self, key: str, value: str) -> None:
        """Write a single setting.

        Args:
            key: "endpointBaseUrl" or "modelName" (snake_case also accepted).
            value: New value.

        Raises:
            ValueError: If the key is unknown or the value is empty.
        """
        attribute = _SETTING_KEYS.get(key)
        if attribute is None:
            raise ValueError(f"Unknown setting: {key}")
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Setting '{key}' requires a non-empty value")
        self._config = dataclasses.replace(self._config, **{attribute: value.strip()})
        logger.info("Setting updated: %s=%s", key, value.strip())


@dataclass
class Session:
    """Process-lifetime state shared by every chat panel.

    Attributes:
        settings: Runtime-mutable backend settings.
        file_cache: Rendered file fragments read during this session.
        selected_files: Paths chosen for the next ask (replaced wholesale).
    """

    settings: ModelSettings = field(default_factory=ModelSettings)
    file_cache: FileContextCache = field(default_factory=FileContextCache)
    selected_files: list[str] = field(default_factory=list)

    def select_files(self, paths: list[str] | tuple[str, ...]) -> list[str]:
        """Replace the selected file set.

        Args:
            paths: New selection. Duplicates are dropped, order is kept.

        Returns:
            The new selection.
        """
        self.selected_files = list(dict.fromkeys(paths))
        return list(self.selected_files)
