"""Typed configuration loading and access.

Settings live in a ``[publish]`` table of an optional TOML file
(``regpub.toml`` next to the build output by default).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_float, get_str, get_table

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_BUILD_DIR",
    "DEFAULT_NPM",
    "DEFAULT_PROPAGATION_DELAY_SECONDS",
    "ConfigError",
    "PublishConfig",
    "load_config",
    "load_config_or_default",
]

CONFIG_FILE_NAME = "regpub.toml"

DEFAULT_NPM = "npm"
DEFAULT_BUILD_DIR = "build/node_modules"
# Querying the registry right after a publish can report the previous version.
DEFAULT_PROPAGATION_DELAY_SECONDS = 5.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class PublishConfig:
    """Settings for the publish step.

    Attributes:
        npm: npm executable (name on PATH or absolute path).
        build_dir: Build output root, relative to the working directory.
        propagation_delay: Seconds to wait before verifying a publish.
    """

    npm: str = DEFAULT_NPM
    build_dir: str = DEFAULT_BUILD_DIR
    propagation_delay: float = DEFAULT_PROPAGATION_DELAY_SECONDS

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> PublishConfig:
        """Create PublishConfig from a mapping (parsed TOML)."""
        publish: StrDict = get_table(data, "publish") or {}

        delay = get_float(publish, "propagation_delay")
        if delay is not None and delay < 0:
            raise ValueError(f"propagation_delay must be >= 0, got {delay}")

        return cls(
            npm=get_str(publish, "npm") or DEFAULT_NPM,
            build_dir=get_str(publish, "build_dir") or DEFAULT_BUILD_DIR,
            propagation_delay=(
                DEFAULT_PROPAGATION_DELAY_SECONDS if delay is None else delay
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[PublishConfig, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(PublishConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(PublishConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(cwd: Path) -> Result[PublishConfig, ConfigError]:
    """Load ``regpub.toml`` from cwd, or defaults when there is none.

    A file that exists but does not parse is still an error.
    """
    path = cwd / CONFIG_FILE_NAME
    if not path.exists():
        return Ok(PublishConfig())
    return load_config(path)
