"""Config loading for LeakGuard.

Reads `.leakguard/config.yaml` (or `~/.leakguard/config.yaml`).
Raises SystemExit on parse errors or missing `version` field.
If no config file is found, returns default values (safe to run without config).

Config search order:
  1. `config_path` argument (if provided, for testing or explicit override)
  2. LEAKGUARD_CONFIG environment variable (if set)
  3. `.leakguard/config.yaml` (working directory, for development)
  4. `~/.leakguard/config.yaml` (home directory)

Environment variable overrides:
  LEAKGUARD_FILTER_ENABLED: overrides sensitive_data_filter.enabled
  LEAKGUARD_LOG_LEVEL:      overrides log_level
  LEAKGUARD_CONFIG:         sets an explicit config file path to try first
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from typing import Any, NoReturn, Optional

import yaml

from leakguard.constants import SUPPORTED_CONFIG_VERSION
from leakguard.utils.logger import get_logger

logger = get_logger(__name__)

# Set of all supported versions, used for validation in load_config()
SUPPORTED_VERSIONS: frozenset[int] = frozenset({SUPPORTED_CONFIG_VERSION})

# Valid values for log_level
VALID_LOG_LEVELS: frozenset[str] = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

# Top-level YAML key holding the filter settings
FILTER_SECTION = "sensitive_data_filter"

# Default config search paths (LEAKGUARD_CONFIG env var prepended at runtime)
DEFAULT_CONFIG_PATHS = [
    ".leakguard/config.yaml",
    os.path.expanduser("~/.leakguard/config.yaml"),
]

_TRUE_WORDS = frozenset({"1", "true", "yes", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "off"})


# ─── Dataclasses ─────────────────────────────────────────────────────────────


@dataclass
class FilterConfig:
    """Sensitive data filter settings.

    enabled:               Master switch. When False every scan returns no matches.
    use_built_in_patterns: Include the built-in rule table ahead of custom rules.
    custom_patterns:       Raw `{name, category, pattern}` mappings, in order.
                           Validated lazily by the registry: numeric values
                           become strings; malformed entries
                           are dropped there, not here.
    """

    enabled: bool = False
    use_built_in_patterns: bool = True
    custom_patterns: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class Config:
    """Root configuration object populated from .leakguard/config.yaml.

    All fields have safe defaults. LeakGuard can start without any config file.
    """

    version: int = SUPPORTED_CONFIG_VERSION
    filter: FilterConfig = field(default_factory=FilterConfig)
    log_level: str = "INFO"
    path: Optional[str] = None  # Path to the loaded config file (for hot-reload)

    @classmethod
    def defaults(cls) -> "Config":
        """Return a fully-default Config (no file required)."""
        return cls()

    @classmethod
    def from_dict(cls, raw: dict, path: Optional[str] = None) -> "Config":
        """Construct Config from a parsed YAML dict.

        Merges user-supplied values onto defaults; unknown keys are silently ignored.

        Raises:
            SystemExit(1): On invalid log_level or a malformed filter section.
        """
        log_level = str(raw.get("log_level", "INFO")).upper()
        if log_level not in VALID_LOG_LEVELS:
            _fail(
                f"CONFIG ERROR: Invalid log_level: '{log_level}'. "
                f"Supported values: {sorted(VALID_LOG_LEVELS)}."
            )

        section = raw.get(FILTER_SECTION) or {}
        if not isinstance(section, dict):
            _fail(f"CONFIG ERROR: '{FILTER_SECTION}' must be a mapping.")

        custom = section.get("custom_patterns") or []
        if not isinstance(custom, list):
            _fail(f"CONFIG ERROR: '{FILTER_SECTION}.custom_patterns' must be a list.")

        return cls(
            version=raw.get("version", SUPPORTED_CONFIG_VERSION),
            filter=parse_filter_section(section),
            log_level=log_level,
            path=path,
        )


def parse_filter_section(section: Any) -> FilterConfig:
    """Leniently parse the `sensitive_data_filter` mapping into a FilterConfig.

    Used both by Config.from_dict() and by the hot-reload path. Never raises:
    wrong-typed values fall back to their defaults with a WARNING.
    """
    if not isinstance(section, dict):
        if section is not None:
            logger.warning(
                "Filter section is not a mapping, using defaults",
                actual_type=type(section).__name__,
            )
        return FilterConfig()

    custom = section.get("custom_patterns") or []
    if not isinstance(custom, list):
        logger.warning(
            "custom_patterns is not a list, ignoring",
            actual_type=type(custom).__name__,
        )
        custom = []

    return FilterConfig(
        enabled=_as_bool(section.get("enabled"), default=False, key="enabled"),
        use_built_in_patterns=_as_bool(
            section.get("use_built_in_patterns"), default=True, key="use_built_in_patterns"
        ),
        custom_patterns=list(custom),
    )


def _as_bool(value: Any, default: bool, key: str) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    logger.warning("Expected a boolean, using default", key=key, value=value, default=default)
    return default


def _fail(msg: str) -> NoReturn:
    print(msg, file=sys.stderr)
    raise SystemExit(1)


# ─── Config loading ───────────────────────────────────────────────────────────


def read_config_file(path: str) -> Any:
    """Read and parse a YAML config file.

    Raises:
        yaml.YAMLError: Invalid YAML.
        OSError:        File unreadable (including missing).
    """
    with open(path) as fh:
        return yaml.safe_load(fh)


def load_config(config_path: Optional[str] = None) -> Config:
    """Load and validate LeakGuard configuration.

    Search order:
      1. ``config_path`` argument (if provided)
      2. ``LEAKGUARD_CONFIG`` environment variable (if set)
      3. ``.leakguard/config.yaml`` (current working directory)
      4. ``~/.leakguard/config.yaml`` (home directory)

    If no file is found at any of these paths, returns default Config (not an error).
    If a file is found but invalid, writes error to stderr and raises SystemExit(1).

    Environment overrides are applied after loading (or defaulting).

    Raises:
        SystemExit(1): On YAML parse error, missing ``version`` field, unsupported
                       version, invalid filter section, or invalid env override.
    """
    search_paths: list[str] = []
    if config_path:
        search_paths.append(config_path)
    env_config = os.environ.get("LEAKGUARD_CONFIG")
    if env_config:
        search_paths.append(env_config)
    search_paths.extend(DEFAULT_CONFIG_PATHS)

    found_path: Optional[str] = None
    for candidate in search_paths:
        expanded = os.path.expanduser(candidate)
        if os.path.isfile(expanded):
            found_path = expanded
            break

    # ── No config file found: defaults ───────────────────────────────────────
    if found_path is None:
        logger.info("No config file found, using defaults", searched=search_paths)
        config = Config.defaults()
        _apply_env_overrides(config)
        return config

    # ── Parse config file ─────────────────────────────────────────────────────
    logger.info("Loading config", path=found_path)

    try:
        raw = read_config_file(found_path)
    except yaml.YAMLError as exc:
        _fail(
            f"CONFIG ERROR: Failed to parse {found_path}: {exc}\n"
            "LeakGuard refuses to start with an invalid config. "
            "Check the YAML syntax and try again."
        )
    except OSError as exc:
        _fail(f"CONFIG ERROR: Could not read {found_path}: {exc}")

    if not isinstance(raw, dict):
        if raw is None:
            _fail(
                f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
                "Add 'version: 1' to the top of your config file."
            )
        _fail(
            f"CONFIG ERROR: {found_path} is not a valid YAML mapping.\n"
            "The config file must be a YAML dictionary at the top level."
        )

    # ── Version validation ────────────────────────────────────────────────────
    version = raw.get("version")
    if version is None:
        _fail(
            f"CONFIG ERROR: {found_path} is missing the required 'version' field.\n"
            "Add 'version: 1' to the top of your config file."
        )
    if version not in SUPPORTED_VERSIONS:
        _fail(
            f"CONFIG ERROR: Unsupported config version: {version}. "
            f"Supported versions: {sorted(SUPPORTED_VERSIONS)}."
        )

    config = Config.from_dict(raw, path=found_path)
    _apply_env_overrides(config)

    logger.info(
        "Config loaded",
        path=found_path,
        version=config.version,
        filter_enabled=config.filter.enabled,
        custom_pattern_count=len(config.filter.custom_patterns),
    )
    return config


def _apply_env_overrides(config: Config) -> None:
    """Apply environment variable overrides to a Config object in-place.

    Currently handles:
      LEAKGUARD_FILTER_ENABLED: boolean word (true/false, 1/0, yes/no, on/off)
      LEAKGUARD_LOG_LEVEL:      one of VALID_LOG_LEVELS

    Raises:
        SystemExit(1): If an override is set but not a valid value.
    """
    env_enabled = os.environ.get("LEAKGUARD_FILTER_ENABLED")
    if env_enabled is not None:
        word = env_enabled.strip().lower()
        if word in _TRUE_WORDS:
            config.filter.enabled = True
        elif word in _FALSE_WORDS:
            config.filter.enabled = False
        else:
            _fail(
                "CONFIG ERROR: LEAKGUARD_FILTER_ENABLED environment variable is not "
                f"a valid boolean: '{env_enabled}'"
            )

    env_level = os.environ.get("LEAKGUARD_LOG_LEVEL")
    if env_level is not None:
        level = env_level.strip().upper()
        if level not in VALID_LOG_LEVELS:
            _fail(
                "CONFIG ERROR: LEAKGUARD_LOG_LEVEL environment variable is not "
                f"a valid level: '{env_level}'"
            )
        config.log_level = level
