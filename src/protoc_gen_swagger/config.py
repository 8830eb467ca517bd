"""Plugin configuration: the ``protoc`` parameter string and ``swagger.toml``.

``protoc`` hands the plugin a single comma-separated parameter string, taken
from ``--swagger_opt`` or the part of ``--swagger_out`` before the colon::

    protoc --swagger_out=confdir=./conf:./docs api.proto

Recognised keys:

* ``confdir=<path>`` -- directory holding ``swagger.toml``. Loading it is
  mandatory once the key is given; a missing or invalid file is a
  :class:`~protoc_gen_swagger.exceptions.ConfigError`.
* ``include_reserved=<bool>`` -- also generate definitions for files in the
  ``google.protobuf`` namespace (default: excluded).

Unknown keys are ignored. ``swagger.toml`` holds::

    Host = "api.example.com"
    Service = "user-api"

    [Header]
    Auth = "Authorization"

The result is an explicit :class:`~protoc_gen_swagger.models.PluginConfig`
value which callers pass down to the assembler.
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from protoc_gen_swagger.exceptions import ConfigError
from protoc_gen_swagger.models import PluginConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "swagger.toml"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def split_parameter(parameter: str) -> list[tuple[str, str]]:
    """Split a ``protoc`` parameter string into ``(key, value)`` pairs.

    Entries without ``=`` get an empty value; empty entries are dropped.

    Example::

        >>> split_parameter("confdir=./conf,include_reserved")
        [('confdir', './conf'), ('include_reserved', '')]
    """
    pairs: list[tuple[str, str]] = []
    for entry in parameter.split(","):
        entry = entry.strip()
        if not entry:
            continue
        key, _, value = entry.partition("=")
        pairs.append((key.strip(), value.strip()))
    return pairs


def _parse_bool(key: str, value: str) -> bool:
    """Interpret a flag value; a bare key (empty value) means ``True``."""
    if value == "":
        return True
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigError(f"Invalid boolean for parameter '{key}': {value!r}")


def load_config(confdir: Optional[str | Path] = None) -> PluginConfig:
    """Load and validate ``swagger.toml`` from *confdir*.

    Args:
        confdir: Directory containing the file. ``None`` or an empty string
            means the current directory.

    Returns:
        The validated :class:`~protoc_gen_swagger.models.PluginConfig`.

    Raises:
        ConfigError: If the file does not exist, is not valid TOML, or fails
            Pydantic validation.
    """
    directory = Path(confdir) if confdir else Path(".")
    path = directory.resolve() / CONFIG_FILENAME
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    try:
        config = PluginConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {path}: {exc}") from exc

    logger.debug("Loaded config from %s", path)
    return config


def parse_parameter(parameter: str) -> PluginConfig:
    """Build the effective configuration from a ``protoc`` parameter string.

    ``confdir`` is applied first so that flags given on the command line win
    over whatever the file says, regardless of their order in the string.

    Args:
        parameter: The raw parameter string (may be empty).

    Returns:
        The effective :class:`~protoc_gen_swagger.models.PluginConfig`.
        Defaults apply when no ``confdir`` is given.

    Raises:
        ConfigError: If the config file cannot be loaded or a flag value is
            not a boolean.
    """
    pairs = split_parameter(parameter)

    config = PluginConfig()
    for key, value in pairs:
        if key == "confdir":
            config = load_config(value)

    for key, value in pairs:
        if key == "confdir":
            continue
        if key == "include_reserved":
            config.include_reserved = _parse_bool(key, value)
        else:
            logger.debug("Ignoring unknown parameter '%s'", key)

    return config
