from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from .errors import ConfigError

if TYPE_CHECKING:
    from .config import Config


@dataclass(frozen=True)
class Context:
    """Hands the loaded config to the services that consume it."""
    cfg: "Config"

    @property
    def database(self):
        return self.cfg.database

    @property
    def updater(self):
        return self.cfg.updater

    @property
    def notifier(self):
        return self.cfg.notifier

    @property
    def api(self):
        return self.cfg.api


# Process-wide slot for callers that cannot take a Context argument.
# Written once after a successful load, read many times. Not thread-safe.
_app_config: Optional["Config"] = None


def init_app_config(cfg: "Config") -> Context:
    global _app_config
    if _app_config is not None:
        raise ConfigError("application config already initialised")
    _app_config = cfg
    return Context(cfg=cfg)


def app_config() -> "Config":
    if _app_config is None:
        raise ConfigError("application config not initialised; call init_app_config first")
    return _app_config


def reset_app_config() -> None:
    """Clear the slot (tests only)."""
    global _app_config
    _app_config = None
