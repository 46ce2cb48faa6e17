import os
from pathlib import Path

import pytest

from mediaprovider.config.core.codec import EntryEncryptionCodec
from mediaprovider.config.core.persistence import (
    ConfigPersistence, escape_value, unescape_value, parse_lines
)
from mediaprovider.config.core.store import ConfigStore
from mediaprovider.core.exceptions import ConfigPersistenceError
from mediaprovider.provider_info import ProviderInfo


def settings_path(directory, provider_id="config"):
    return directory / f"scraper_{provider_id}.conf"


class TestLoad:

    def test_load_reference_file(self, provider, settings_dir):
        settings_path(settings_dir).write_text(
            "useTmdb=true\n"
            "language=cc\n"
            "languageInt=8\n"
            "someInput=custom\n",
            encoding="utf-8",
        )

        accepted = provider.config.load_from_dir(settings_dir)

        assert accepted == 4
        assert provider.config.get_value_as_bool("useTmdb") is True
        assert provider.config.get_value("language") == "cc"
        assert provider.config.get_value("languageInt") == "8"
        assert provider.config.get_selected_token("languageInt") == "fr"
        assert provider.config.get_value("someInput") == "custom"

    def test_missing_file_is_noop(self, make_provider, settings_dir):
        mpi = make_provider("asdfasdf")
        mpi.config.set_value("language", "aa")

        assert mpi.config.load_from_dir(settings_dir) == 0
        assert mpi.config.get_value("language") == "aa"
        assert not settings_path(settings_dir, "asdfasdf").exists()

    def test_missing_directory_is_noop(self, make_provider, tmp_path):
        mpi = make_provider("asdfasdf")
        assert mpi.config.load_from_dir(tmp_path / "does" / "not" / "exist") == 0

    def test_unknown_and_malformed_lines_are_skipped(self, provider, settings_dir):
        settings_path(settings_dir).write_text(
            "# comment\n"
            "\n"
            "notAKey=whatever\n"
            "no separator here\n"
            "=orphan value\n"
            "language=zz\n"
            "useTmdb=maybe\n"
            "languageInt=99\n"
            "someBool=false\n",
            encoding="utf-8",
        )

        assert provider.config.load_from_dir(settings_dir) == 1
        assert provider.config.get_value("language") == "dd"
        assert provider.config.get_value_as_bool("useTmdb") is False
        assert provider.config.get_value("languageInt") == "5"
        assert provider.config.get_value_as_bool("someBool") is False
        assert "notAKey" not in provider.config.values_snapshot()

    def test_padded_index_loads_as_canonical_index(self, provider, settings_dir):
        settings_path(settings_dir).write_text("languageInt=08\n", encoding="utf-8")

        assert provider.config.load_from_dir(settings_dir) == 1
        assert provider.config.get_value("languageInt") == "8"
        assert provider.config.values_snapshot() == {"languageInt": "8"}

    def test_unreadable_file_raises_and_keeps_store(self, provider, settings_dir):
        settings_path(settings_dir).write_bytes(b"language=\xff\xfe\n")
        provider.config.set_value("language", "aa")

        with pytest.raises(ConfigPersistenceError) as exc_info:
            provider.config.load_from_dir(settings_dir)

        assert exc_info.value.provider_id == "config"
        assert provider.config.get_value("language") == "aa"

    def test_default_directory(self, make_provider, provider, system_config):
        provider.config.set_value("language", "ee")
        provider.config.save()
        assert settings_path(Path(system_config.config_dir)).exists()

        fresh = make_provider()
        fresh.config.load()
        assert fresh.config.get_value("language") == "ee"


class TestSave:

    def test_save_creates_directory_and_file(self, make_provider, tmp_path):
        mpi = make_provider("asdfasdf")
        target = tmp_path / "new" / "dir"

        mpi.config.save_to_dir(target)

        assert settings_path(target, "asdfasdf").exists()
        assert settings_path(target, "asdfasdf").read_text(encoding="utf-8") == ""

    def test_only_set_values_are_written(self, provider, settings_dir):
        provider.config.set_value("language", "bb")
        provider.config.set_value("languageInt", "de")
        provider.config.save_to_dir(settings_dir)

        lines = settings_path(settings_dir).read_text(encoding="utf-8").splitlines()
        assert sorted(lines) == ["language=bb", "languageInt=3"]

    def test_round_trip(self, make_provider, provider, settings_dir):
        provider.config.set_value("useTmdb", "true")
        provider.config.set_value("someInput", "two\nlines \\ and = signs")
        provider.config.set_value("language", "bb")
        provider.config.set_value("languageInt", "de")
        provider.config.set_value("encrypted", "top secret")
        provider.config.save_to_dir(settings_dir)

        fresh = make_provider()
        fresh.config.load_from_dir(settings_dir)

        assert fresh.config.values_snapshot() == provider.config.values_snapshot()
        assert fresh.config.get_value("encrypted") == "top secret"

    def test_encrypted_values_are_not_stored_in_plain_text(self, provider, settings_dir):
        provider.config.set_value("encrypted", "top secret")
        provider.config.save_to_dir(settings_dir)

        content = settings_path(settings_dir).read_text(encoding="utf-8")
        assert "encrypted=" in content
        assert "top secret" not in content

    def test_tampered_encrypted_value_falls_back_to_default(self, make_provider, provider, settings_dir):
        provider.config.set_value("encrypted", "top secret")
        provider.config.save_to_dir(settings_dir)

        path = settings_path(settings_dir)
        path.write_text(path.read_text(encoding="utf-8").replace("encrypted=", "encrypted=xx"),
                        encoding="utf-8")

        fresh = make_provider()
        fresh.config.load_from_dir(settings_dir)
        assert fresh.config.get_value("encrypted") == "This is some encrypted text"

    def test_select_index_with_numeric_tokens_round_trips(self, settings_dir):
        mpi = ProviderInfo("numeric", "name", "description")
        mpi.config.add_select_index("size", ["2", "0", "1"], "2")
        mpi.config.set_value("size", "1")
        assert mpi.config.get_value("size") == "2"
        mpi.config.save_to_dir(settings_dir)

        fresh = ProviderInfo("numeric", "name", "description")
        fresh.config.add_select_index("size", ["2", "0", "1"], "2")
        fresh.config.load_from_dir(settings_dir)
        assert fresh.config.get_selected_token("size") == "1"

    def test_unusual_keys_round_trip(self, settings_dir):
        keys = ["dotted.key", "inner space", "trailing#hash", "ünïcode"]
        store = ConfigStore("keys")
        for key in keys:
            store.add_text(key, "")
            store.set_value(key, f"value of {key}")
        store.save_to_dir(settings_dir)

        fresh = ConfigStore("keys")
        for key in keys:
            fresh.add_text(key, "")
        assert fresh.load_from_dir(settings_dir) == len(keys)
        assert fresh.values_snapshot() == store.values_snapshot()

    def test_rejected_keys_are_never_written(self, settings_dir):
        store = ConfigStore("keys")
        store.add_text("a=b", "x")
        store.add_text("#hidden", "x")
        store.add_text(" padded ", "x")
        for key in ("a=b", "#hidden", " padded "):
            store.set_value(key, "y")
        store.save_to_dir(settings_dir)

        assert settings_path(settings_dir, "keys").read_text(encoding="utf-8") == ""

    def test_unencodable_value_raises_and_keeps_previous_file(self, settings_dir):
        class SurrogateCodec(EntryEncryptionCodec):
            def encode(self, value):
                return "\udcff"

        store = ConfigStore("broken", ConfigPersistence(SurrogateCodec("unit-test-passphrase")))
        store.add_text("plain", "")
        store.add_text("secret", "", encrypted=True)
        store.set_value("plain", "before")
        store.save_to_dir(settings_dir)
        path = settings_path(settings_dir, "broken")
        before = path.read_text(encoding="utf-8")

        store.set_value("secret", "anything")
        with pytest.raises(ConfigPersistenceError) as exc_info:
            store.save_to_dir(settings_dir)

        assert exc_info.value.provider_id == "broken"
        assert path.read_text(encoding="utf-8") == before
        assert sorted(p.name for p in settings_dir.iterdir()) == [path.name]

    def test_failed_replace_keeps_previous_file(self, provider, settings_dir, monkeypatch):
        provider.config.set_value("language", "aa")
        provider.config.save_to_dir(settings_dir)
        path = settings_path(settings_dir)
        before = path.read_text(encoding="utf-8")

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", failing_replace)
        provider.config.set_value("language", "ee")

        with pytest.raises(ConfigPersistenceError):
            provider.config.save_to_dir(settings_dir)

        assert path.read_text(encoding="utf-8") == before
        assert sorted(p.name for p in settings_dir.iterdir()) == [path.name]
        assert provider.config.get_value("language") == "ee"

    def test_directory_that_is_a_file_raises(self, provider, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")

        with pytest.raises(ConfigPersistenceError):
            provider.config.save_to_dir(blocker)


class TestLineFormat:

    def test_escape_round_trip(self):
        value = "a\\b\nc\rd=e"
        escaped = escape_value(value)
        assert "\n" not in escaped and "\r" not in escaped
        assert unescape_value(escaped) == value

    def test_parse_lines_keeps_value_whitespace(self):
        assert list(parse_lines([" key = value \n"])) == [("key", " value ")]

    def test_settings_file_name(self, settings_dir):
        assert ConfigPersistence.settings_file("tmdb", settings_dir) == settings_dir / "scraper_tmdb.conf"
