"""Runtime settings for the build server connection and resolution defaults.

Precedence, highest first: CLI flags, PKG_BUILD_REMOTE_* environment
variables, the ``build_server`` section of a YAML config file, and the
built-in defaults in ``Constants``.
"""
from __future__ import annotations

import logging
import os
import shlex
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional

import yaml

from constants import Constants
from errors import UsageError

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    """Connection target and defaults for one invocation."""

    host: str = Constants.BUILD_SERVER
    domain: str = Constants.BUILD_DOMAIN
    port: int = Constants.BUILD_SERVER_PORT
    scheme: str = Constants.BUILD_SCHEME
    username: Optional[str] = Constants.BUILD_USERNAME
    password: Optional[str] = None
    timeout: int = Constants.REQUEST_TIMEOUT
    default_platform: str = Constants.DEFAULT_PLATFORM
    index_command: List[str] = field(default_factory=lambda: list(Constants.INDEX_COMMAND))

    def update(self, values: Mapping[str, Any], source: str) -> None:
        """Overlay ``values`` onto these settings, coercing types.

        Raises:
            UsageError: If a value cannot be coerced (e.g. a non-numeric port).
        """
        known = {f.name for f in fields(self)}
        for key, value in values.items():
            attr = str(key).strip().lower().replace("-", "_")
            if attr not in known:
                logger.warning("Ignoring unknown setting '%s' from %s", key, source)
                continue
            if value is None:
                continue
            try:
                setattr(self, attr, _coerce(attr, value))
            except (TypeError, ValueError) as exc:
                raise UsageError(f"invalid value for '{attr}' from {source}: {value!r}") from exc

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """Collect PKG_BUILD_REMOTE_<SETTING> variables."""
        environ = os.environ if environ is None else environ
        out = {}
        for f in fields(cls):
            env_key = Constants.ENV_PREFIX + f.name.upper()
            if environ.get(env_key):
                out[f.name] = environ[env_key]
        return out


def _coerce(attr: str, value: Any) -> Any:
    if attr in ("port", "timeout"):
        return int(value)
    if attr == "index_command":
        if isinstance(value, (list, tuple)):
            return [str(v) for v in value]
        return shlex.split(str(value))
    return str(value)


def _default_config_paths() -> List[str]:
    return [
        Constants.CONFIG_FILE_LOCAL,
        os.path.expanduser(Constants.CONFIG_FILE_USER),
    ]


def load_config_file(path: Optional[str] = None) -> Dict[str, Any]:
    """Return the ``build_server`` section of a YAML config file.

    With an explicit ``path`` the file must exist and parse; otherwise the
    default locations are tried and missing files are skipped.

    Raises:
        UsageError: If an explicit config file is missing or malformed.
    """
    candidates = [path] if path else _default_config_paths()
    for candidate in candidates:
        if not os.path.isfile(candidate):
            if path:
                raise UsageError(f"Config file not found: {candidate}")
            continue
        try:
            with open(candidate, "r", encoding="utf-8") as fh:
                data = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as exc:
            if path:
                raise UsageError(f"Failed to load config {candidate}: {exc}") from exc
            logger.warning("Failed to load config %s: %s", candidate, exc)
            continue
        if not isinstance(data, dict):
            if path:
                raise UsageError(f"Config file {candidate} must contain a mapping")
            continue
        logger.debug("Loaded config from %s", candidate)
        section = data.get(Constants.CONFIG_SECTION, data)
        return section if isinstance(section, dict) else {}
    return {}


def load_settings(args: Any = None, environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Assemble Settings from defaults, config file, environment and CLI args."""
    settings = Settings()
    config_path = getattr(args, "CONFIG", None)
    settings.update(load_config_file(config_path), source=config_path or "config file")
    settings.update(Settings.from_env(environ), source="environment")

    cli = {}
    for attr, dest in (
        ("host", "BUILD_HOST"),
        ("port", "BUILD_PORT"),
        ("domain", "BUILD_DOMAIN"),
        ("default_platform", "DEFAULT_PLATFORM"),
    ):
        value = getattr(args, dest, None)
        if value is not None:
            cli[attr] = value
    settings.update(cli, source="command line")
    return settings
