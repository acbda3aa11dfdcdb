import os
import threading
import time

import pytest

from jupiter.config import Config, ConfigError


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / "settings.yml"


def test_load_from_string_provides_values():
    config = Config("somefile.yml")
    config.load_from_string("\nserver:\n    port: 12345\n", None)
    assert config.current().config()["server"]["port"] == 12345


def test_config_update_works():
    config = Config("somefile.yml")
    config.load_from_string("test: 42", time.time())
    notifier = config.notifier()

    assert config.current().config()["test"] == 42

    with pytest.raises(ConfigError):
        config.load_from_string("test: 'invalid", time.time())
    assert config.current().config()["test"] == 42

    received = []
    listener = threading.Thread(target=lambda: received.append(notifier.recv(5.0)))
    listener.start()
    config.load_from_string("test: 4242", time.time())
    listener.join()

    assert received == [True]
    assert config.current().config()["test"] == 4242


def test_failed_parse_does_not_notify():
    config = Config("somefile.yml")
    notifier = config.notifier()
    with pytest.raises(ConfigError):
        config.load_from_string("test: 'invalid", None)
    assert notifier.recv(0.05) is False


def test_notifier_only_reports_later_changes():
    config = Config("somefile.yml")
    config.load_from_string("a: 1", None)
    notifier = config.notifier()
    assert notifier.recv(0.05) is False
    config.load_from_string("a: 2", None)
    config.load_from_string("a: 3", None)
    assert notifier.recv(0.05) is True
    assert notifier.recv(0.05) is False


def test_handle_is_a_snapshot():
    config = Config("somefile.yml")
    config.load_from_string("value: 1", None)
    handle = config.current()
    config.load_from_string("value: 2", None)
    assert handle.config()["value"] == 1
    assert config.current().config()["value"] == 2


def test_empty_config_is_none():
    config = Config("somefile.yml")
    assert config.current().config() is None
    config.load_from_string("", None)
    assert config.current().config() is None


def test_store_and_load_round_trip(config_path):
    config = Config(config_path)
    config.store("\nserver:\n    port: 12345\n")
    config.load()
    assert config.current().config()["server"]["port"] == 12345

    with pytest.raises(ConfigError):
        config.store('server: "test')

    config.load()
    assert config.current().config()["server"]["port"] == 12345
    assert "12345" in config_path.read_text(encoding="utf-8")


def test_load_missing_file_raises(config_path):
    config = Config(config_path)
    with pytest.raises(ConfigError):
        config.load()
    assert config.current().config() is None


def test_load_directory_is_skipped(tmp_path):
    config = Config(tmp_path)
    config.load()
    assert config.current().config() is None
    assert config.last_modified() is None


def test_last_modified_of_missing_file_is_none(config_path):
    assert Config(config_path).last_modified() is None


def test_last_modified_matches_file(config_path):
    config_path.write_text("a: 1", encoding="utf-8")
    assert Config(config_path).last_modified() == os.stat(config_path).st_mtime


def test_reload_if_changed(config_path):
    config = Config(config_path)
    assert config.reload_if_changed() is False

    config_path.write_text("value: 1", encoding="utf-8")
    assert config.reload_if_changed() is True
    assert config.current().config()["value"] == 1
    assert config.reload_if_changed() is False

    config_path.write_text("value: 2", encoding="utf-8")
    later = os.stat(config_path).st_mtime + 10
    os.utime(config_path, (later, later))
    assert config.reload_if_changed() is True
    assert config.current().config()["value"] == 2


def test_reload_with_broken_file_keeps_config(config_path):
    config = Config(config_path)
    config.load_from_string("value: 1", None)
    config_path.write_text("value: 'broken", encoding="utf-8")
    assert config.reload_if_changed() is False
    assert config.current().config()["value"] == 1