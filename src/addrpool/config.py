import copy
import logging
import os
from pathlib import Path

import yaml

from addrpool.pool import DEFAULT_MAX_ATTEMPTS, MAX_ALLOCATED


DEFAULTS = {
    "pool": {
        "ceiling": MAX_ALLOCATED,
        "max_attempts": DEFAULT_MAX_ATTEMPTS,
    },
    "logging": {
        "level": "INFO",
    },
}


def _optional_int(value: str) -> int | None:
    if value.strip().lower() in ("", "none", "null"):
        return None
    return int(value)


# env var -> (section, key, parser)
ENV_OVERRIDES = {
    "ADDRPOOL_CEILING": ("pool", "ceiling", int),
    "ADDRPOOL_MAX_ATTEMPTS": ("pool", "max_attempts", _optional_int),
    "ADDRPOOL_LOG_LEVEL": ("logging", "level", str.upper),
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    pass


def load_config(path: Path) -> dict:
    """Load and parse a YAML config file."""
    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Invalid config file: {path}")
    return config


def merge_defaults(config: dict) -> dict:
    """Deep-merge config over DEFAULTS, returning a new dict."""
    def _merge(base, override):
        result = copy.deepcopy(base)
        for k, v in override.items():
            if isinstance(v, dict) and isinstance(result.get(k), dict):
                result[k] = _merge(result[k], v)
            else:
                result[k] = v
        return result

    return _merge(DEFAULTS, config)


def apply_env_overrides(config: dict, environ: dict | None = None) -> dict:
    """Override config values from ADDRPOOL_* environment variables."""
    environ = os.environ if environ is None else environ
    for var, (section, key, parse) in ENV_OVERRIDES.items():
        if var not in environ:
            continue
        try:
            value = parse(environ[var])
        except ValueError as e:
            raise ConfigError(f"Invalid value for {var}: {environ[var]!r}") from e
        config.setdefault(section, {})[key] = value
    return config


def validate_config(config: dict) -> None:
    """Validate the pool and logging sections."""
    pool = config.get("pool")
    if not isinstance(pool, dict):
        raise ConfigError("Config section 'pool' must be a mapping")

    ceiling = pool.get("ceiling")
    if not isinstance(ceiling, int) or isinstance(ceiling, bool) or ceiling < 0:
        raise ConfigError(f"pool.ceiling must be a non-negative integer, got {ceiling!r}")

    attempts = pool.get("max_attempts")
    if attempts is not None:
        if not isinstance(attempts, int) or isinstance(attempts, bool) or attempts < 1:
            raise ConfigError(
                f"pool.max_attempts must be a positive integer or null, got {attempts!r}"
            )

    level = config.get("logging", {}).get("level")
    if not isinstance(level, str) or level.upper() not in LOG_LEVELS:
        raise ConfigError(
            f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}"
        )


def resolve_config(path: Path | None = None, environ: dict | None = None) -> dict:
    """Build the effective config: defaults, then file, then environment."""
    config = merge_defaults(load_config(path) if path else {})
    config = apply_env_overrides(config, environ)
    validate_config(config)
    logging.getLogger(__name__).debug("Effective config: %s", config)
    return config


def scaffold_config() -> dict:
    """Return a starter config for 'addrpool init'."""
    return copy.deepcopy(DEFAULTS)
