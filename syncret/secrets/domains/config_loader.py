"""Configuration loader for syncret."""
import os
import logging
from dataclasses import fields
from pathlib import Path
from typing import Dict, Any, Mapping, Optional
import yaml

from .errors import ConfigError
from .models import LoaderConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "SYNCRET_CONFIG"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "syncret" / "config.yml"

# Environment variable -> (LoaderConfig field, key in the YAML "syncret" section)
ENV_VARS = {
    "SYNCRET_DECRYPT": ("decrypt_command", "decrypt"),
    "SYNCRET_SUFFIX": ("secret_suffix", "suffix"),
    "SYNCRET_DESCRIPTION_SUFFIX": ("description_suffix", "description_suffix"),
    "SYNCRET_PATTERN_SUFFIX": ("pattern_suffix", "pattern_suffix"),
    "SYNCRET_PREFIX": ("fs_prefix", "prefix"),
    "SYNCRET_ROOT": ("root_dir", "root"),
    "SYNCRET_TRIM": ("trim", "trim"),
}

SUFFIX_FIELDS = ("secret_suffix", "description_suffix", "pattern_suffix")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _get_config_path(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """
    Get config file path.

    Priority order:
    1. Explicit path (--config)
    2. SYNCRET_CONFIG environment variable
    3. Default location: ~/.config/syncret/config.yml, if it exists

    Returns:
        Absolute path to config file, or None if no file applies

    Raises:
        ConfigError: If an explicitly requested file doesn't exist
    """
    env = os.environ if env is None else env

    explicit = path or env.get(CONFIG_ENV_VAR)
    if explicit:
        config_path = Path(explicit).expanduser()
        if not config_path.is_file():
            raise ConfigError(f"Configuration file not found at: {config_path}")
        logger.debug(f"Using config file: {config_path}")
        return str(config_path.resolve())

    if DEFAULT_CONFIG_PATH.is_file():
        logger.debug(f"Using default config location: {DEFAULT_CONFIG_PATH}")
        return str(DEFAULT_CONFIG_PATH)

    return None


def load_config_file(path: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Load the optional YAML configuration file.

    Args:
        path: Explicit config path; when given the file must exist
        env: Environment mapping (defaults to os.environ)

    Returns:
        Parsed configuration, or an empty dict when there is no config file

    Raises:
        ConfigError: If the file is unreadable, invalid YAML, or not a mapping
    """
    config_path = _get_config_path(path, env)
    if config_path is None:
        return {}

    try:
        with open(config_path, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}") from e

    if config is None:
        logger.warning(f"Config file at {config_path} is empty")
        return {}

    if not isinstance(config, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping at the top level")

    for section in ("syncret", "aws", "gcp"):
        if section in config and not isinstance(config[section], dict):
            raise ConfigError(f"'{section}' section in config at {config_path} must be a mapping")

    logger.debug(f"Configuration loaded from {config_path}")
    return config


def normalize_suffix(suffix: str) -> str:
    """Strip leading dots and prepend exactly one; empty input stays empty."""
    stripped = suffix.lstrip(".")
    if not stripped:
        return ""
    return "." + stripped


def parse_bool(value: Any, source: str) -> bool:
    """Parse a boolean from YAML or an environment string."""
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for {source}: {value!r}")


def _coerce(field_name: str, value: Any, source: str) -> Any:
    if field_name == "trim":
        return parse_bool(value, source)
    if value is None:
        return None
    value = str(value)
    if field_name in SUFFIX_FIELDS:
        # An empty suffix means "use the default"
        return normalize_suffix(value) or None
    if field_name == "decrypt_command" and not value:
        return None
    return value


def build_loader_config(
    env: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
    file_config: Optional[Mapping[str, Any]] = None,
) -> LoaderConfig:
    """
    Merge overrides, environment, config file and defaults into a LoaderConfig.

    Args:
        env: Environment mapping (defaults to os.environ)
        overrides: LoaderConfig field values from CLI flags; None values are ignored
        file_config: Parsed YAML config (see load_config_file)

    Returns:
        Immutable LoaderConfig

    Raises:
        ConfigError: On unknown override keys, bad booleans, or an unresolvable root dir
    """
    env = os.environ if env is None else env
    overrides = overrides or {}
    file_section = (file_config or {}).get("syncret") or {}

    known = {f.name for f in fields(LoaderConfig)}
    unknown = set(overrides) - known
    if unknown:
        raise ConfigError(f"Unknown loader settings: {', '.join(sorted(unknown))}")

    values: Dict[str, Any] = {}

    # Lowest precedence first so later sources overwrite earlier ones
    for env_var, (field_name, file_key) in ENV_VARS.items():
        if file_key in file_section:
            coerced = _coerce(field_name, file_section[file_key], f"config key '{file_key}'")
            if coerced is not None:
                values[field_name] = coerced
        if env_var in env:
            coerced = _coerce(field_name, env[env_var], env_var)
            if coerced is not None:
                values[field_name] = coerced

    for field_name, value in overrides.items():
        if value is None:
            continue
        coerced = _coerce(field_name, value, f"--{field_name}")
        if coerced is not None:
            values[field_name] = coerced

    root_dir = values.get("root_dir", "")
    if root_dir:
        try:
            values["root_dir"] = os.path.abspath(os.path.expanduser(root_dir))
        except OSError as e:
            raise ConfigError(f"Cannot resolve root directory {root_dir!r}: {e}") from e

    config = LoaderConfig(**values)
    logger.debug(
        f"Loader config: suffixes={config.suffixes} decrypt={config.decrypt_command!r} "
        f"prefix={config.fs_prefix!r} root={config.root_dir!r} trim={config.trim}"
    )
    return config
