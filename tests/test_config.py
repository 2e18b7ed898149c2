import os

import pytest

from jellofin.config import Config, ConfigError


def write(tmp_path, text):
    path = tmp_path / "server.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_defaults_from_empty_mapping():
    config = Config.from_dict({})
    assert config.listen.port == "8096"
    assert config.logfile == "stdout"
    assert config.jellyfin.server_name == "Jellofin"
    assert config.collections == []
    assert config.debug_logs is False
    assert config.jellyfin.autoregister is False
    assert config.get_database_path() is None


def test_full_file(tmp_path):
    path = write(
        tmp_path,
        """
listen:
  address: 127.0.0.1
  port: "9000"
dbdir: /var/lib/media
logfile: /tmp/server.log
collections:
  - id: films
    name: Films
    type: movies
    directory: /media/films
    hlsserver: http://localhost:6453
jellyfin:
  serverId: abc
  servername: Home
  autoregister: true
  imagequalityposter: 40
""",
    )
    config = Config.from_file(path)
    assert config.listen.address == "127.0.0.1"
    assert config.listen.port == "9000"
    assert config.logfile == "/tmp/server.log"
    assert len(config.collections) == 1
    coll = config.collections[0]
    assert (coll.id, coll.name, coll.collection_type, coll.directory) == (
        "films",
        "Films",
        "movies",
        "/media/films",
    )
    assert coll.hlsserver == "http://localhost:6453"
    assert coll.baseurl is None
    assert config.jellyfin.server_id == "abc"
    assert config.jellyfin.server_name == "Home"
    assert config.jellyfin.autoregister is True
    assert config.jellyfin.image_quality_poster == 40


def test_serverid_alias():
    config = Config.from_dict({"jellyfin": {"serverid": "xyz"}})
    assert config.jellyfin.server_id == "xyz"


def test_database_path_from_dbdir():
    config = Config.from_dict({"dbdir": "/data"})
    assert config.get_database_path() == os.path.join("/data", "tink-items.db")


def test_sqlite_filename_takes_precedence():
    config = Config.from_dict(
        {"dbdir": "/data", "database": {"sqlite": {"filename": "/other/db.sqlite"}}}
    )
    assert config.get_database_path() == "/other/db.sqlite"


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError, match="Failed to read config file"):
        Config.from_file(tmp_path / "absent.yaml")


def test_invalid_yaml(tmp_path):
    path = write(tmp_path, "listen: [unclosed\n")
    with pytest.raises(ConfigError, match="Failed to parse config file"):
        Config.from_file(path)


def test_collection_requires_name(tmp_path):
    path = write(tmp_path, "collections:\n  - type: movies\n    directory: /m\n")
    with pytest.raises(ConfigError, match="name"):
        Config.from_file(path)


def test_port_must_be_string():
    with pytest.raises(ConfigError):
        Config.from_dict({"listen": {"port": 8096}})


def test_sqlite_requires_filename():
    with pytest.raises(ConfigError):
        Config.from_dict({"database": {"sqlite": {}}})