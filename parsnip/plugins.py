import json
import logging
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, StrictBool

logger = logging.getLogger(__name__)


class PluginConfig(BaseModel):
    """An external tool server the recipe writer may call."""

    id: str = Field(..., min_length=1, description="Stable plugin identifier")
    name: str = Field(..., min_length=1, description="Name shown to the reader")
    command: str = Field(..., min_length=1, description="Executable that starts the server")
    args: List[str] = Field(default_factory=list, description="Arguments for the command")
    enabled: StrictBool = Field(True, description="Whether the plugin is offered")

    def to_dict(self) -> dict:
        return self.model_dump()


DEFAULT_PLUGIN_CONFIGS = [
    PluginConfig(
        id="sequential-thinking",
        name="Sequential Thinking",
        command="npx",
        args=["@modelcontextprotocol/server-sequential-thinking"],
        enabled=True,
    ),
]


def default_plugin_configs() -> list[PluginConfig]:
    return [config.model_copy(deep=True) for config in DEFAULT_PLUGIN_CONFIGS]


def load_plugin_configs(path: Path | str | None = None) -> list[PluginConfig]:
    """
    Loads tool-server plugin configs from a JSON list.
    Args:
        path (Path | str | None): The JSON file. None means use the defaults.
    Returns:
        list[PluginConfig]: The configured plugins, or the defaults when the
        file is missing or any entry is invalid.
    """
    if path is None:
        return default_plugin_configs()

    path = Path(path)
    if not path.exists():
        return default_plugin_configs()

    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError("expected a JSON list of plugins")
        # pydantic's ValidationError is a ValueError
        return [PluginConfig.model_validate(entry) for entry in data]
    except (OSError, ValueError) as e:
        logger.error("Failed to load plugin configs from %s: %s", path, e)
        return default_plugin_configs()


def enabled_plugins(configs: list[PluginConfig]) -> list[PluginConfig]:
    return [config for config in configs if config.enabled]
