"""Records stored in the server database."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    id: str
    username: str
    password: str
    created: str | None = None
    lastlogin: str | None = None
    lastused: str | None = None


@dataclass
class AccessToken:
    token: str
    userid: str
    deviceid: str | None = None
    devicename: str | None = None
    applicationname: str | None = None
    applicationversion: str | None = None
    remoteaddress: str | None = None
    created: datetime | None = None
    lastused: datetime | None = None


@dataclass
class DbItem:
    id: str
    name: str
    genre: str
    nfotime: int
    firstvideo: int
    lastvideo: int
    votes: int | None = None
    year: int | None = None
    rating: float | None = None


@dataclass
class UserData:
    userid: str
    itemid: str
    position: int | None = None
    playedpercentage: int | None = None
    played: bool | None = None
    playcount: int | None = None
    favorite: bool | None = None
    timestamp: datetime | None = None


@dataclass
class Playlist:
    id: str
    name: str
    userid: str
    timestamp: datetime | None = None


@dataclass
class PlaylistItem:
    playlistid: str
    itemid: str
    itemorder: int
    timestamp: datetime | None = None


class DbError(Exception):
    """A database operation failed."""

    prefix = "Database error"

    def __init__(self, detail: str) -> None:
        super().__init__(f"{self.prefix}: {detail}")
        self.detail = detail


class NotFoundError(DbError):
    """The requested record does not exist."""

    prefix = "Not found"


class AlreadyExistsError(DbError):
    """A record with the same key already exists."""

    prefix = "Already exists"