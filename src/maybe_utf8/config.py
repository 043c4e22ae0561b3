"""Global configuration for maybe_utf8.

Configuration can be set via:
1. Environment variables (MAYBE_UTF8_LEGACY_ENCODING, MAYBE_UTF8_ERRORS)
2. Global configure() call
3. Per-call arguments (highest priority)

The settings only affect ``MaybeUTF8.decode()``, which maps raw bytes through
a codec when the caller knows (or assumes) the legacy encoding.

Example:
    >>> import maybe_utf8
    >>> maybe_utf8.configure(legacy_encoding="iso-8859-2")
    >>> maybe_utf8.MaybeUTF8.from_bytes(b"caf\\xe9").decode()
    'café'
"""

from __future__ import annotations

import codecs
import logging
import os

logger = logging.getLogger(__name__)

# Default configuration
_DEFAULTS: dict = {
    # ZIP archives without the UTF-8 flag store names in IBM code page 437
    "legacy_encoding": "cp437",
    "errors": "strict",  # any registered codec error handler
}

_config: dict = dict(_DEFAULTS)


def _check_encoding(name: str) -> None:
    try:
        codecs.lookup(name)
    except LookupError as e:
        raise ValueError(f"Unknown encoding: {name!r}") from e


def _check_errors(name: str) -> None:
    try:
        codecs.lookup_error(name)
    except LookupError as e:
        raise ValueError(f"Unknown error handler: {name!r}") from e


def configure(**kwargs) -> None:
    """Set global configuration options.

    Args:
        legacy_encoding: Codec used by ``MaybeUTF8.decode()`` when no encoding
            is given. Must be known to the ``codecs`` registry.
        errors: Codec error handler used by ``MaybeUTF8.decode()`` when none
            is given ("strict", "replace", "ignore", ...).

    Example:
        >>> configure(legacy_encoding="cp1252", errors="replace")
    """
    valid_keys = set(_config.keys())
    invalid_keys = set(kwargs.keys()) - valid_keys
    if invalid_keys:
        raise ValueError(f"Invalid config keys: {invalid_keys}. Valid: {valid_keys}")

    if "legacy_encoding" in kwargs:
        _check_encoding(kwargs["legacy_encoding"])
    if "errors" in kwargs:
        _check_errors(kwargs["errors"])

    _config.update(kwargs)


def get_config(key: str, default=None):
    """Get a configuration value.

    Checks in order:
    1. Environment variable (MAYBE_UTF8_{KEY})
    2. Global config set via configure()
    3. Default value

    Args:
        key: Configuration key (e.g., "legacy_encoding")
        default: Default value if not found

    Returns:
        Configuration value
    """
    env_key = f"MAYBE_UTF8_{key.upper()}"
    env_value = os.environ.get(env_key)
    if env_value is not None:
        logger.debug("Using %s=%r from environment", env_key, env_value)
        return env_value

    return _config.get(key, default)


def get_legacy_encoding(override: str | None = None) -> str:
    """Get the legacy encoding from override, env, or config."""
    if override is not None:
        return override
    return get_config("legacy_encoding", _DEFAULTS["legacy_encoding"])


def get_errors(override: str | None = None) -> str:
    """Get the codec error handler from override, env, or config."""
    if override is not None:
        return override
    return get_config("errors", _DEFAULTS["errors"])


def reset_config() -> None:
    """Reset configuration to defaults. Useful for testing."""
    global _config
    _config = dict(_DEFAULTS)
