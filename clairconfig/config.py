import logging
import os
from datetime import timedelta
from pathlib import Path
from typing import Annotated, Any, Dict

import yaml
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer, ValidationError

from .duration import coerce_duration, format_duration
from .errors import ConfigIOError, ConfigParseError, DatasourceNotLoadedError
from .pagination import decode_key, generate_key

log = logging.getLogger(__name__)

Duration = Annotated[
    timedelta,
    BeforeValidator(coerce_duration),
    PlainSerializer(format_duration, return_type=str, when_used="json"),
]


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True)


class DatabaseConfig(_Section):
    type: str = "pgsql"          # store backend discriminator
    # frozen stops reassignment only; the dict itself is shared with the caller
    options: Dict[str, Any] = Field(default_factory=dict)


class UpdaterConfig(_Section):
    cron: str = "@midnight"
    disabled: bool = False


class NotifierConfig(_Section):
    # unknown keys are notifier-specific parameters (endpoints, proxies...)
    model_config = ConfigDict(frozen=True, extra="allow")

    attempts: int = 5
    renotify_interval: Duration = Field(timedelta(hours=2), alias="renotifyinterval")

    @property
    def params(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class APIConfig(_Section):
    port: int = 6060
    health_port: int = Field(6061, alias="healthport")
    timeout: Duration = timedelta(seconds=900)
    pagination_key: str = Field("", alias="paginationkey")
    cert_file: str = Field("", alias="certfile")
    key_file: str = Field("", alias="keyfile")
    ca_file: str = Field("", alias="cafile")


class Config(_Section):
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    updater: UpdaterConfig = Field(default_factory=UpdaterConfig)
    notifier: NotifierConfig = Field(default_factory=NotifierConfig)
    api: APIConfig = Field(default_factory=APIConfig)


class ConfigFile(_Section):
    """YAML envelope; everything lives under the top-level ``clair`` key."""
    clair: Config = Field(default_factory=Config)


def default_config() -> Config:
    return Config()


def _merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for key, value in over.items():
        if value is None and key in base:
            continue  # explicit null keeps the default
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], value)
        else:
            out[key] = value
    return out


def _overlay(data: Any) -> Config:
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigParseError(f"expected a mapping at top level, got {type(data).__name__}")
    defaults = ConfigFile().model_dump(by_alias=True)
    try:
        return ConfigFile.model_validate(_merge(defaults, data)).clair
    except ValidationError as exc:
        raise ConfigParseError(str(exc)) from exc


def load_config(path: str | os.PathLike | None) -> Config:
    """Load a config file, falling back to defaults when ``path`` is empty.

    Environment variables in ``path`` are expanded. Fields present in the
    file replace the defaults one by one; nested blocks are merged, not
    replaced. A random pagination key is generated when the file has none.

    Raises ConfigIOError, ConfigParseError, PaginationKeyError or
    KeyGenerationError; the config must not be used after any of them.
    """
    if path is None or os.fspath(path) == "":
        log.debug("no config path given, using defaults")
        return default_config()

    resolved = Path(os.path.expandvars(os.fspath(path)))
    try:
        with resolved.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except OSError as exc:
        raise ConfigIOError(f"could not read config {resolved}: {exc}") from exc
    except (yaml.YAMLError, UnicodeDecodeError) as exc:
        raise ConfigParseError(f"could not parse config {resolved}: {exc}") from exc

    cfg = _overlay(data)

    if not cfg.api.pagination_key:
        log.warning("no pagination key configured; generated one, pagination tokens will not survive a restart")
        api = cfg.api.model_copy(update={"pagination_key": generate_key()})
        cfg = cfg.model_copy(update={"api": api})
    else:
        decode_key(cfg.api.pagination_key)

    log.info("loaded configuration from %s", resolved)
    return cfg


def dump_config(cfg: Config) -> str:
    data = ConfigFile(clair=cfg).model_dump(mode="json", by_alias=True)
    return yaml.safe_dump(data, sort_keys=False)


def require_datasource(cfg: Config) -> None:
    if not cfg.database.options.get("source"):
        raise DatasourceNotLoadedError()
