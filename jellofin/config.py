"""Server configuration loaded from a YAML file."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

DEFAULT_PORT = "8096"
DEFAULT_LOGFILE = "stdout"
DEFAULT_SERVER_NAME = "Jellofin"
DATABASE_FILENAME = "tink-items.db"


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or parsed."""


def _mapping(value: Any, where: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ConfigError(f"{where}: expected a mapping")
    return value


def _opt_str(data: Mapping[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            raise ConfigError(f"{key}: expected a string, got {type(value).__name__}")
        return value
    return None


def _req_str(data: Mapping[str, Any], key: str, where: str) -> str:
    value = _opt_str(data, key)
    if value is None:
        raise ConfigError(f"{where}: missing field '{key}'")
    return value


@dataclass
class ListenConfig:
    address: str | None = None
    port: str = DEFAULT_PORT
    tlscert: str | None = None
    tlskey: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ListenConfig:
        return cls(
            address=_opt_str(data, "address"),
            port=_opt_str(data, "port") or DEFAULT_PORT,
            tlscert=_opt_str(data, "tlscert"),
            tlskey=_opt_str(data, "tlskey"),
        )


@dataclass
class SqliteConfig:
    filename: str


@dataclass
class DatabaseConfig:
    sqlite: SqliteConfig | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DatabaseConfig:
        if data.get("sqlite") is None:
            return cls()
        sqlite = _mapping(data["sqlite"], "database.sqlite")
        return cls(sqlite=SqliteConfig(_req_str(sqlite, "filename", "database.sqlite")))


@dataclass
class CollectionConfig:
    name: str
    collection_type: str
    directory: str
    id: str | None = None
    baseurl: str | None = None
    hlsserver: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CollectionConfig:
        where = "collections"
        return cls(
            name=_req_str(data, "name", where),
            collection_type=_req_str(data, "type", where),
            directory=_req_str(data, "directory", where),
            id=_opt_str(data, "id"),
            baseurl=_opt_str(data, "baseurl"),
            hlsserver=_opt_str(data, "hlsserver"),
        )


@dataclass
class JellyfinConfig:
    server_id: str | None = None
    server_name: str = DEFAULT_SERVER_NAME
    autoregister: bool = False
    image_quality_poster: int | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> JellyfinConfig:
        autoregister = data.get("autoregister", False)
        if autoregister is None:
            autoregister = False
        if not isinstance(autoregister, bool):
            raise ConfigError("jellyfin.autoregister: expected a boolean")
        quality = data.get("imagequalityposter")
        if quality is not None and (
            isinstance(quality, bool) or not isinstance(quality, int) or quality < 0
        ):
            raise ConfigError("jellyfin.imagequalityposter: expected a non-negative integer")
        return cls(
            server_id=_opt_str(data, "serverId", "serverid"),
            server_name=_opt_str(data, "servername") or DEFAULT_SERVER_NAME,
            autoregister=autoregister,
            image_quality_poster=quality,
        )


@dataclass
class Config:
    listen: ListenConfig = field(default_factory=ListenConfig)
    appdir: str | None = None
    cachedir: str | None = None
    dbdir: str | None = None
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    logfile: str = DEFAULT_LOGFILE
    collections: list[CollectionConfig] = field(default_factory=list)
    jellyfin: JellyfinConfig = field(default_factory=JellyfinConfig)
    debug_logs: bool = False

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> Config:
        """Read and parse a YAML configuration file."""
        try:
            with open(path, encoding="utf-8") as fh:
                content = fh.read()
        except OSError as exc:
            raise ConfigError(f"Failed to read config file {path}: {exc}") from exc
        try:
            return cls.from_dict(yaml.safe_load(content))
        except (yaml.YAMLError, ConfigError) as exc:
            raise ConfigError(f"Failed to parse config file {path}: {exc}") from exc

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | None) -> Config:
        """Build a configuration from already-parsed YAML data."""
        data = _mapping(data, "config")
        raw_collections = data.get("collections") or []
        if not isinstance(raw_collections, list):
            raise ConfigError("collections: expected a list")
        return cls(
            listen=ListenConfig.from_dict(_mapping(data.get("listen"), "listen")),
            appdir=_opt_str(data, "appdir"),
            cachedir=_opt_str(data, "cachedir"),
            dbdir=_opt_str(data, "dbdir"),
            database=DatabaseConfig.from_dict(_mapping(data.get("database"), "database")),
            logfile=_opt_str(data, "logfile") or DEFAULT_LOGFILE,
            collections=[
                CollectionConfig.from_dict(_mapping(entry, "collections"))
                for entry in raw_collections
            ],
            jellyfin=JellyfinConfig.from_dict(_mapping(data.get("jellyfin"), "jellyfin")),
        )

    def get_database_path(self) -> str | None:
        """Return the sqlite database path, or None when none is configured."""
        if self.database.sqlite is not None:
            return self.database.sqlite.filename
        if self.dbdir is not None:
            return os.path.join(self.dbdir, DATABASE_FILENAME)
        return None