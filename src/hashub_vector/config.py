"""
Configuration module for the Hashub Vector client.

Supports loading from YAML/JSON files with environment variable overrides.
Default values are loaded from defaults.yaml for maintainability.
"""

import dataclasses
import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml
from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

VERSION = "1.0.0"

# Path to the default configuration file
_DEFAULTS_CONFIG_PATH = Path(__file__).parent / "defaults.yaml"

# Cache for default values
_defaults_cache: dict[str, Any] | None = None

_FALLBACK_BASE_URL = "https://api.vector.hashub.dev"
_FALLBACK_TIMEOUT = 30.0
_FALLBACK_MAX_RETRIES = 3


def _load_defaults() -> dict[str, Any]:
    """Load default configuration values from defaults.yaml."""
    global _defaults_cache

    if _defaults_cache is not None:
        return _defaults_cache

    if not _DEFAULTS_CONFIG_PATH.exists():
        logger.warning(f"Defaults config not found: {_DEFAULTS_CONFIG_PATH}")
        _defaults_cache = {}
        return _defaults_cache

    try:
        content = _DEFAULTS_CONFIG_PATH.read_text(encoding="utf-8")
        _defaults_cache = yaml.safe_load(content) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse defaults config: {e}")
        _defaults_cache = {}

    return _defaults_cache


def get_default(section: str, key: str, fallback: Any = None) -> Any:
    """Get a default value from the defaults config."""
    defaults = _load_defaults()
    section_defaults = defaults.get(section) or {}
    return section_defaults.get(key, fallback)


@dataclass(frozen=True)
class ClientConfig:
    """Immutable settings for one client instance.

    Attributes:
        api_key: API key sent as a bearer token. Required.
        base_url: Root URL of the Hashub Vector API.
        timeout: Per-attempt request timeout in seconds.
        max_retries: Total attempts per call, including the first.
        extra_headers: Additional headers sent with every request.
    """

    api_key: str
    base_url: str = field(
        default_factory=lambda: get_default("client", "base_url", _FALLBACK_BASE_URL)
    )
    timeout: float = field(
        default_factory=lambda: get_default("client", "timeout", _FALLBACK_TIMEOUT)
    )
    max_retries: int = field(
        default_factory=lambda: get_default("client", "max_retries", _FALLBACK_MAX_RETRIES)
    )
    extra_headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ValueError("api_key is required and must be a non-empty string")
        if not self.base_url:
            raise ValueError("base_url must not be empty")
        if isinstance(self.timeout, bool) or not isinstance(self.timeout, (int, float)):
            raise ValueError("timeout must be a number of seconds")
        if self.timeout <= 0:
            raise ValueError("timeout must be greater than 0")
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ValueError("max_retries must be an integer")
        if self.max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        # Freeze the headers so the config stays read-only after construction
        object.__setattr__(
            self,
            "extra_headers",
            MappingProxyType(
                {str(k): str(v) for k, v in dict(self.extra_headers or {}).items()}
            ),
        )

    def __hash__(self) -> int:
        # mappingproxy is unhashable, so hash the headers as sorted pairs
        return hash(
            (
                self.api_key,
                self.base_url,
                self.timeout,
                self.max_retries,
                tuple(sorted(self.extra_headers.items())),
            )
        )

    @classmethod
    def from_file(cls, path: Path | str, **overrides: Any) -> "ClientConfig":
        """
        Load configuration from a YAML or JSON file.

        Args:
            path: Path to the configuration file (.yaml, .yml, or .json)
            **overrides: Values taking precedence over the file

        Returns:
            ClientConfig instance with loaded values

        Raises:
            FileNotFoundError: If the config file doesn't exist
            ValueError: If the file format is unsupported or values are invalid
        """
        values = read_config_file(path)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls._from_dict(values)

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "ClientConfig":
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")
        values = {k: v for k, v in data.items() if k in known}
        values.setdefault("api_key", "")
        return cls(**values)

    def with_env_overrides(self) -> "ClientConfig":
        """
        Return a copy with environment variable overrides applied.

        Recognised variables:
            - HASHUB_API_KEY
            - HASHUB_BASE_URL
            - HASHUB_TIMEOUT
            - HASHUB_MAX_RETRIES
        """
        return dataclasses.replace(self, **env_overrides())

    def to_dict(self, mask_secrets: bool = True) -> dict[str, Any]:
        """Convert configuration to a dictionary."""
        return {
            "api_key": mask_api_key(self.api_key) if mask_secrets else self.api_key,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
            "extra_headers": dict(self.extra_headers),
        }

    def to_yaml(self) -> str:
        """Serialize configuration to YAML string, with the API key masked."""
        return yaml.dump({"client": self.to_dict()}, default_flow_style=False, sort_keys=False)

    def to_json(self) -> str:
        """Serialize configuration to JSON string, with the API key masked."""
        return json.dumps({"client": self.to_dict()}, indent=2)


_ENV_MAPPINGS = {
    "HASHUB_API_KEY": ("api_key", str),
    "HASHUB_BASE_URL": ("base_url", str),
    "HASHUB_TIMEOUT": ("timeout", float),
    "HASHUB_MAX_RETRIES": ("max_retries", int),
}


def env_overrides() -> dict[str, Any]:
    """Collect config values from HASHUB_* environment variables."""
    values: dict[str, Any] = {}
    for env_var, (key, converter) in _ENV_MAPPINGS.items():
        value = os.environ.get(env_var)
        if value is None or value == "":
            continue
        try:
            values[key] = converter(value)
        except ValueError as e:
            raise ValueError(f"Invalid value for {env_var}: {value!r}") from e
    return values


def read_config_file(path: Path | str) -> dict[str, Any]:
    """
    Read raw config values from a YAML or JSON file.

    Values may sit under a top-level ``client`` section or at the top level.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    content = path.read_text(encoding="utf-8")

    if path.suffix in (".yaml", ".yml"):
        data = yaml.safe_load(content) or {}
    elif path.suffix == ".json":
        data = json.loads(content) if content.strip() else {}
    else:
        raise ValueError(f"Unsupported config file format: {path.suffix}")

    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")

    section = data.get("client", data)
    if not isinstance(section, dict):
        raise ValueError(f"'client' section must be a mapping: {path}")
    return dict(section)


def mask_api_key(api_key: str) -> str:
    """Hide all but the edges of an API key for display."""
    if len(api_key) <= 8:
        return "***"
    return f"{api_key[:4]}...{api_key[-4:]}"


def load_config(
    config_path: Optional[Path | str] = None,
    apply_env: bool = True,
    **overrides: Any,
) -> ClientConfig:
    """
    Load configuration with optional environment variable overrides.

    Precedence, lowest first: defaults.yaml, config file, environment
    (including a ``.env`` file), keyword overrides. Keyword overrides that
    are ``None`` are ignored.

    Args:
        config_path: Optional path to config file. If None, uses defaults.
        apply_env: Whether to read ``.env`` and HASHUB_* variables.
        **overrides: Explicit values, e.g. ``api_key=...``.

    Returns:
        ClientConfig instance

    Raises:
        ValueError: If no API key is found or a value is invalid
    """
    values: dict[str, Any] = {}
    if config_path:
        values.update(read_config_file(config_path))

    if apply_env:
        # Real environment variables win over .env entries
        load_dotenv(find_dotenv(usecwd=True), override=False)
        values.update(env_overrides())

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ClientConfig._from_dict(values)
