from jellofin.models import (
    AccessToken,
    AlreadyExistsError,
    DbError,
    DbItem,
    NotFoundError,
    Playlist,
    PlaylistItem,
    User,
    UserData,
)


def test_error_messages():
    assert str(NotFoundError("user alice")) == "Not found: user alice"
    assert str(AlreadyExistsError("user alice")) == "Already exists: user alice"
    assert str(DbError("disk full")) == "Database error: disk full"


def test_errors_share_base():
    err = NotFoundError("item x")
    assert err.detail == "item x"
    assert str(err) == "Not found: item x"
    assert issubclass(NotFoundError, DbError)
    assert issubclass(AlreadyExistsError, DbError)
    assert AlreadyExistsError("item y").detail == "item y"


def test_user_optional_fields_default_to_none():
    password = "password"
    user = User(id="u1", username="alice", password=password)
    assert (user.created, user.lastlogin, user.lastused) == (None, None, None)
    assert user == User(id="u1", username="alice", password=password)


def test_access_token_defaults():
    access = AccessToken(token="token", userid="u1", deviceid="dev-placeholder")
    assert access.deviceid == "dev-placeholder"
    assert access.devicename is None
    assert access.created is None


def test_user_data_and_playlists():
    data = UserData(userid="u1", itemid="i1", position=42, favorite=True)
    assert data.position == 42
    assert data.played is None
    playlist = Playlist(id="p1", name="Mine", userid="u1")
    entry = PlaylistItem(playlistid=playlist.id, itemid="i1", itemorder=0)
    assert entry.playlistid == "p1"
    assert entry.timestamp is None


def test_db_item_optional_fields():
    item = DbItem(id="i1", name="Heat", genre="Crime", nfotime=1, firstvideo=2, lastvideo=3)
    assert (item.votes, item.year, item.rating) == (None, None, None)
    assert item.lastvideo == 3