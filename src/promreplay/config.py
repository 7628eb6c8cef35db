"""Configuration and environment handling for promreplay."""

import os
import re
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from promreplay.exceptions import ConfigError
from promreplay.models.config import ReplayConfig

__all__ = [
    "ServerSettings",
    "get_server_settings",
    "load_config",
    "parse_config",
]


class ServerSettings(BaseModel):
    """Process-level settings that are not part of a replay config.

    All settings can be customized via environment variables.
    """

    host: str = Field(
        default="0.0.0.0",
        description="Interface the scrape endpoint binds to",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level of the promreplay logger",
    )

    access_log: bool = Field(
        default=False,
        description="Whether uvicorn logs every scrape request",
    )

    @classmethod
    def from_env(cls) -> "ServerSettings":
        """Create ServerSettings from environment variables.

        Environment variables:
        - PROMREPLAY_HOST: Bind address (default: 0.0.0.0)
        - PROMREPLAY_LOG_LEVEL: Log level (default: INFO)
        - PROMREPLAY_ACCESS_LOG: Set to "1" to enable access logs (default: off)
        """
        return cls(
            host=os.environ.get("PROMREPLAY_HOST", cls.model_fields["host"].default),
            log_level=os.environ.get("PROMREPLAY_LOG_LEVEL", cls.model_fields["log_level"].default).upper(),
            access_log=os.environ.get("PROMREPLAY_ACCESS_LOG") == "1",
        )


# Global settings instance
_server_settings: ServerSettings | None = None


def get_server_settings() -> ServerSettings:
    """Get server settings.

    Returns cached instance if already initialized.
    """
    global _server_settings
    if _server_settings is None:
        _server_settings = ServerSettings.from_env()
    return _server_settings


class ConfigLoader(yaml.SafeLoader):
    """SafeLoader that rejects duplicate keys and has no base-60 integers.

    YAML 1.1 reads unquoted `1:15` as 75. Replay configs use colons for
    ranges (`days_of_month: [1:15]`) and clock times (`09:00`), so such
    scalars stay strings here.
    """

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            if not isinstance(key_node, yaml.ScalarNode) or key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping", node.start_mark, f"found duplicate key {key!r}", key_node.start_mark
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


_INT_TAG = "tag:yaml.org,2002:int"

ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _INT_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
ConfigLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(
        r"""^(?:[-+]?0b[0-1_]+
        |[-+]?0[0-7_]+
        |[-+]?(?:0|[1-9][0-9_]*)
        |[-+]?0x[0-9a-fA-F_]+)$""",
        re.X,
    ),
    list("-+0123456789"),
)


def _format_validation_error(error: ValidationError) -> str:
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "<root>"
        lines.append(f"  {location}: {item['msg']}")
    return "\n".join(lines)


def parse_config(text: str, source: str = "<string>") -> ReplayConfig:
    """Parse a YAML replay config.

    Args:
        text: YAML document
        source: Name used in error messages

    Returns:
        Validated ReplayConfig

    Raises:
        ConfigError: If the document is not valid YAML (duplicate keys included),
            is not a mapping, or fails validation (unknown keys included)
    """
    try:
        data = yaml.load(text, Loader=ConfigLoader)
    except yaml.YAMLError as e:
        raise ConfigError(f"{source}: invalid YAML: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{source}: top level must be a mapping, got {type(data).__name__}")

    try:
        return ReplayConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"{source}: invalid config\n{_format_validation_error(e)}") from e


def load_config(path: str | Path) -> ReplayConfig:
    """Read and validate a replay config file.

    Args:
        path: Path to a YAML config file

    Returns:
        Validated ReplayConfig

    Raises:
        ConfigError: If the file cannot be read or its content is invalid
    """
    config_path = Path(path)
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"cannot read config file {config_path}: {e}") from e

    return parse_config(text, source=str(config_path))
