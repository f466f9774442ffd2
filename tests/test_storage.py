"""Preferences, favorites, trash, and command history persistence."""

from __future__ import annotations

import json
import os
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest import mock

from tfe.errors import ConfigWriteError, TrashIoError
from tfe.storage import config, paths
from tfe.storage.favorites import FavoritesStore
from tfe.storage.history import MAX_HISTORY, CommandHistory, HistoryStore, push_history
from tfe.storage.trash import TrashStore


class PathsTests(unittest.TestCase):
    def _environ(self, home: str, **extra: str) -> dict[str, str]:
        env = {key: value for key, value in os.environ.items() if key != "XDG_CONFIG_HOME"}
        env["HOME"] = home
        env.update(extra)
        return env

    def test_config_dir_is_dot_config_under_home(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.dict(os.environ, self._environ(tmp), clear=True):
                self.assertEqual(paths.default_config_dir(), Path(tmp) / ".config" / "tfe")

    def test_macos_still_uses_dot_config(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with mock.patch.dict(os.environ, self._environ(tmp), clear=True), mock.patch("sys.platform", "darwin"):
                self.assertEqual(paths.default_config_dir(), Path(tmp) / ".config" / "tfe")

    def test_xdg_config_home_is_honoured(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            xdg = str(Path(tmp) / "xdg")
            with mock.patch.dict(os.environ, self._environ(tmp, XDG_CONFIG_HOME=xdg), clear=True):
                self.assertEqual(paths.default_config_dir(), Path(xdg) / "tfe")


class ConfigTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.config_path = Path(self._tmp.name) / "nested" / "config.json"
        patcher = mock.patch.object(paths, "CONFIG_PATH", self.config_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_missing_file_uses_defaults(self) -> None:
        self.assertFalse(config.load_show_hidden())
        self.assertIsNone(config.load_display_mode())
        self.assertIsNone(config.load_theme_name())

    def test_preferences_round_trip_and_merge(self) -> None:
        config.save_show_hidden(True)
        config.save_display_mode("tree")
        self.assertTrue(config.load_show_hidden())
        self.assertEqual(config.load_display_mode(), "tree")
        data = json.loads(self.config_path.read_text(encoding="utf-8"))
        self.assertEqual(data, {"show_hidden": True, "display_mode": "tree"})

    def test_unknown_display_mode_is_not_saved(self) -> None:
        config.save_display_mode("columns")
        self.assertFalse(self.config_path.exists())

    def test_malformed_config_is_ignored(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text("{not json", encoding="utf-8")
        self.assertEqual(config.load_config(), {})
        self.config_path.write_text('["list"]', encoding="utf-8")
        self.assertEqual(config.load_config(), {})

    def test_theme_name_is_trimmed(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text('{"theme": "  ocean "}', encoding="utf-8")
        self.assertEqual(config.load_theme_name(), "ocean")


class FavoritesTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.path = self.root / "favorites.json"

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_toggle_persists_immediately(self) -> None:
        store = FavoritesStore(self.path)
        target = self.root / "project"
        self.assertTrue(store.toggle(target))
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), [str(target)])
        reloaded = FavoritesStore(self.path)
        reloaded.load()
        self.assertTrue(reloaded.is_favorite(target))
        self.assertFalse(reloaded.toggle(target))
        self.assertEqual(json.loads(self.path.read_text(encoding="utf-8")), [])

    def test_malformed_file_loads_empty(self) -> None:
        self.path.write_text('{"a": 1}', encoding="utf-8")
        self.assertEqual(FavoritesStore(self.path).load(), set())

    def test_write_failure_raises_but_keeps_memory(self) -> None:
        store = FavoritesStore(self.path)
        with mock.patch.object(paths, "write_json", side_effect=PermissionError(13, "Permission denied")):
            with self.assertRaises(ConfigWriteError):
                store.toggle(self.root / "x")
        self.assertIn(self.root / "x", store.favorites)


class TrashTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.store = TrashStore(self.root / "config" / "trash.json", self.root / "config" / "trash")
        self.work = self.root / "work"
        self.work.mkdir()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_move_and_restore_round_trip(self) -> None:
        victim = self.work / "notes.txt"
        victim.write_text("keep me", encoding="utf-8")
        record = self.store.move_to_trash(victim, now=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc))
        self.assertFalse(victim.exists())
        self.assertEqual(record.trashed_path.name, "20260102_030405_notes.txt")
        self.assertEqual(record.size, 7)

        entries = self.store.entries()
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].path, victim)
        self.assertEqual(entries[0].trashed_path, record.trashed_path)

        restored = self.store.restore(record.trashed_path)
        self.assertEqual(restored, victim)
        self.assertEqual(victim.read_text(encoding="utf-8"), "keep me")
        self.assertEqual(self.store.load_records(), [])

    def test_same_name_in_same_second_gets_unique_key(self) -> None:
        moment = datetime(2026, 1, 2, tzinfo=timezone.utc)
        first = self.work / "a.txt"
        first.write_text("1", encoding="utf-8")
        one = self.store.move_to_trash(first, now=moment)
        first.write_text("2", encoding="utf-8")
        two = self.store.move_to_trash(first, now=moment)
        self.assertNotEqual(one.trashed_path, two.trashed_path)

    def test_restore_refuses_to_overwrite(self) -> None:
        victim = self.work / "dup.txt"
        victim.write_text("old", encoding="utf-8")
        record = self.store.move_to_trash(victim)
        victim.write_text("new", encoding="utf-8")
        with self.assertRaises(TrashIoError):
            self.store.restore(record.trashed_path)
        self.assertEqual(len(self.store.load_records()), 1)

    def test_directories_are_trashed_whole(self) -> None:
        folder = self.work / "pkg"
        (folder / "sub").mkdir(parents=True)
        (folder / "sub" / "a.bin").write_bytes(b"12345")
        record = self.store.move_to_trash(folder)
        self.assertTrue(record.is_dir)
        self.assertEqual(record.size, 5)
        self.assertEqual(self.store.total_size(), 5)

    def test_empty_and_permanent_delete(self) -> None:
        names = ["a.txt", "b.txt", "c.txt"]
        records = []
        for name in names:
            path = self.work / name
            path.write_text(name, encoding="utf-8")
            records.append(self.store.move_to_trash(path))
        self.store.permanently_delete(records[0].trashed_path)
        self.assertFalse(records[0].trashed_path.exists())
        self.assertEqual(len(self.store.load_records()), 2)
        self.assertEqual(self.store.empty(), 2)
        self.assertEqual(self.store.load_records(), [])
        self.assertFalse(records[1].trashed_path.exists())

    def test_cleanup_older_than(self) -> None:
        now = datetime(2026, 6, 1, tzinfo=timezone.utc)
        old = self.work / "old.txt"
        old.write_text("o", encoding="utf-8")
        fresh = self.work / "fresh.txt"
        fresh.write_text("f", encoding="utf-8")
        self.store.move_to_trash(old, now=now - timedelta(days=40))
        self.store.move_to_trash(fresh, now=now)
        self.assertEqual(self.store.cleanup_older_than(now - timedelta(days=30)), 1)
        self.assertEqual([record.original_name for record in self.store.load_records()], ["fresh.txt"])

    def test_newest_first(self) -> None:
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        for offset, name in enumerate(["first.txt", "second.txt"]):
            path = self.work / name
            path.write_text(name, encoding="utf-8")
            self.store.move_to_trash(path, now=base + timedelta(minutes=offset))
        self.assertEqual([entry.name for entry in self.store.entries()], ["second.txt", "first.txt"])

    def test_missing_source_raises(self) -> None:
        with self.assertRaises(TrashIoError):
            self.store.move_to_trash(self.work / "nope")

    def test_metadata_failure_rolls_back_move(self) -> None:
        victim = self.work / "stay.txt"
        victim.write_text("s", encoding="utf-8")
        with mock.patch.object(paths, "write_json", side_effect=OSError(28, "No space left on device")):
            with self.assertRaises(TrashIoError):
                self.store.move_to_trash(victim)
        self.assertTrue(victim.exists())


class HistoryTests(unittest.TestCase):
    def test_push_dedupes_and_caps(self) -> None:
        entries = push_history(["ls", "pwd"], "ls")
        self.assertEqual(entries, ["pwd", "ls"])
        many: list[str] = []
        for index in range(MAX_HISTORY + 5):
            many = push_history(many, f"cmd {index}")
        self.assertEqual(len(many), MAX_HISTORY)
        self.assertEqual(many[-1], f"cmd {MAX_HISTORY + 4}")

    def test_browsing(self) -> None:
        history = CommandHistory()
        for command in ["one", "two", "  ", "three"]:
            history.add(command)
        self.assertEqual(history.entries, ["one", "two", "three"])
        self.assertEqual(history.previous(), "three")
        self.assertEqual(history.previous(), "two")
        self.assertEqual(history.previous(), "one")
        self.assertEqual(history.previous(), "one")
        self.assertEqual(history.next(), "two")
        self.assertEqual(history.next(), "three")
        self.assertEqual(history.next(), "")

    def test_store_round_trip_with_directories(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "command_history.json"
            store = HistoryStore(path)
            store.load()
            store.record("make", Path("/proj"))
            store.record("  git status ", Path("/other"))
            store.record("", Path("/other"))
            store.save()

            again = HistoryStore(path)
            loaded = again.load()
            self.assertEqual(loaded.entries, ["make", "git status"])
            self.assertEqual(loaded.position, 2)
            self.assertEqual(again.for_directory(Path("/proj")), ["make"])
            self.assertEqual(again.for_directory(Path("/nowhere")), [])

    def test_directory_commands_come_before_global_ones(self) -> None:
        store = HistoryStore(Path("/unused/history.json"))
        store.record("make", Path("/proj"))
        store.record("ls", Path("/other"))
        store.record("make test", Path("/proj"))
        store.record("pwd", Path("/other"))

        history = store.history_for(Path("/proj"))
        self.assertEqual(history.entries, ["ls", "pwd", "make", "make test"])
        self.assertEqual(history.previous(), "make test")
        self.assertEqual(history.previous(), "make")
        self.assertEqual(history.previous(), "pwd")
        self.assertEqual(store.history_for(Path("/elsewhere")).entries, ["make", "ls", "make test", "pwd"])

    def test_legacy_array_format(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "command_history.json"
            path.write_text('["ls", 3, "pwd"]', encoding="utf-8")
            self.assertEqual(HistoryStore(path).load().entries, ["ls", "pwd"])


if __name__ == "__main__":
    unittest.main()
