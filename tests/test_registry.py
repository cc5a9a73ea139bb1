import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from typing import Any
from unittest import mock

from pydantic import BaseModel

from culebra.config.models import LoadConfig
from culebra.errors import ConfigNotFoundError, ExecutionError
from culebra.registry import (
    Settings,
    auto_bind_to_registry,
    bind_to_registry,
    bind_to_registry_with_arrays,
    parse_scalar,
)

VIPER_CONFIG = """
return {
    database = {
        host = "localhost",
        port = 5432,
        names = {"db1", "db2", "db3"}
    },
    features = {"feature1", "feature2"}
}
"""


class DatabaseConfig(BaseModel):
    host: str
    port: int
    names: list[str]


class AppConfig(BaseModel):
    database: DatabaseConfig
    features: list[str]


class RecordingRegistry:
    def __init__(self) -> None:
        self.calls: list[tuple[str, Any]] = []

    def set(self, key: str, value: Any) -> None:
        self.calls.append((key, value))


class TempDirTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.tmp_path = Path(self._tmp.name)

    def write(self, content: str, name: str = "test.lua") -> Path:
        path = self.tmp_path / name
        path.write_text(textwrap.dedent(content), encoding="utf-8")
        return path


class SettingsTests(unittest.TestCase):
    def test_dotted_get_into_nested_value(self) -> None:
        settings = Settings()
        settings.set("database", {"host": "localhost", "port": 5432.0})
        self.assertEqual(settings.get("database.host"), "localhost")
        self.assertEqual(settings.get_int("database.port"), 5432)
        self.assertEqual(settings.get_string("database.port"), "5432")
        self.assertIsNone(settings.get("database.user"))
        self.assertEqual(settings.get("database.user", "root"), "root")

    def test_dotted_set_creates_parents(self) -> None:
        settings = Settings()
        settings.set("a.b.c", 1)
        self.assertEqual(settings.all_settings(), {"a": {"b": {"c": 1}}})
        self.assertTrue(settings.is_set("a.b"))
        self.assertFalse(settings.is_set("a.x"))

    def test_set_copies_value(self) -> None:
        settings = Settings()
        value = {"items": ["a"]}
        settings.set("group", value)
        value["items"].append("b")
        self.assertEqual(settings.get("group.items"), ["a"])

    def test_merge(self) -> None:
        settings = Settings()
        settings.set("db", {"host": "a", "port": 1})
        settings.merge({"db": {"port": 2}, "debug": True})
        self.assertEqual(settings.all_settings(), {"db": {"host": "a", "port": 2}, "debug": True})

    def test_typed_getters(self) -> None:
        settings = Settings()
        settings.set("flags", {"on": True, "one": 1.0, "text": "yes"})
        settings.set("ratio", 0.25)
        settings.set("timeouts", [1.0, 2.0, 30.0])
        settings.set("hosts", ["a", "b"])
        self.assertTrue(settings.get_bool("flags.on"))
        self.assertTrue(settings.get_bool("flags.one"))
        self.assertTrue(settings.get_bool("flags.text"))
        self.assertFalse(settings.get_bool("flags.missing"))
        self.assertEqual(settings.get_float("ratio"), 0.25)
        self.assertEqual(settings.get_string("ratio"), "0.25")
        self.assertEqual(settings.get_string("flags.on"), "true")
        self.assertEqual(settings.get_int_list("timeouts"), [1, 2, 30])
        self.assertEqual(settings.get_string_list("hosts"), ["a", "b"])
        self.assertEqual(settings.get_string_list("flags"), [])
        self.assertEqual(settings.get_string("missing", "fallback"), "fallback")

    def test_int_getters_fall_back_on_non_finite_numbers(self) -> None:
        settings = Settings()
        settings.set("big", float("inf"))
        settings.set("nothing", float("nan"))
        settings.set("text", "inf")
        settings.set("limits", [1.0, float("-inf"), 3.0])
        self.assertEqual(settings.get_int("big"), 0)
        self.assertEqual(settings.get_int("big", 7), 7)
        self.assertEqual(settings.get_int("nothing", 5), 5)
        self.assertEqual(settings.get_int("text", 9), 9)
        self.assertEqual(settings.get_int_list("limits"), [1, 0, 3])

    def test_unmarshal(self) -> None:
        settings = Settings()
        settings.set("database", {"host": "localhost", "port": 5432.0, "names": ["db1"]})
        settings.set("features", ["f1"])
        config = settings.unmarshal(AppConfig)
        self.assertEqual(config.database.port, 5432)
        self.assertEqual(config.features, ["f1"])

    def test_env_overrides(self) -> None:
        settings = Settings()
        settings.set("database", {"host": "localhost", "port": 5432.0})
        env = {"CULEBRA_TEST__DATABASE__HOST": "db.internal", "CULEBRA_TEST__DATABASE__PORT": "6543"}
        with mock.patch.dict(os.environ, env):
            applied = settings.apply_env_overrides("CULEBRA_TEST__")
        self.assertEqual(applied, 2)
        self.assertEqual(settings.get("database.host"), "db.internal")
        self.assertEqual(settings.get_int("database.port"), 6543)

    def test_invalid_key(self) -> None:
        with self.assertRaises(ValueError):
            Settings().set("..", 1)


class ParseScalarTests(unittest.TestCase):
    def test_scalars(self) -> None:
        self.assertEqual(parse_scalar("8080"), 8080)
        self.assertEqual(parse_scalar("1.5"), 1.5)
        self.assertIs(parse_scalar("true"), True)
        self.assertEqual(parse_scalar("hello"), "hello")
        self.assertEqual(parse_scalar(""), "")

    def test_structures_stay_text(self) -> None:
        self.assertEqual(parse_scalar("[1, 2]"), "[1, 2]")
        self.assertEqual(parse_scalar("2024-01-15"), "2024-01-15")


class ConfigDiscoveryTests(TempDirTestCase):
    def test_no_name_means_no_search(self) -> None:
        self.assertIsNone(Settings().find_config_file(".lua"))

    def test_search_paths_in_order(self) -> None:
        first = self.tmp_path / "first"
        second = self.tmp_path / "second"
        first.mkdir()
        second.mkdir()
        (second / "app.lua").write_text("x = 1", encoding="utf-8")

        settings = Settings()
        settings.set_config_name("app")
        settings.add_config_path(str(first))
        settings.add_config_path(str(second))
        self.assertEqual(settings.find_config_file(".lua"), second / "app.lua")

    def test_env_vars_in_search_path(self) -> None:
        (self.tmp_path / "app.lua").write_text("x = 1", encoding="utf-8")
        settings = Settings()
        settings.set_config_name("app")
        settings.add_config_path("$CULEBRA_TEST_CONFIG_DIR")
        with mock.patch.dict(os.environ, {"CULEBRA_TEST_CONFIG_DIR": str(self.tmp_path)}):
            found = settings.find_config_file(".lua")
        self.assertEqual(found, self.tmp_path / "app.lua")

    def test_defaults_to_working_directory(self) -> None:
        (self.tmp_path / "test.lua").write_text("test_value = 'autoloaded'", encoding="utf-8")
        settings = Settings()
        settings.set_config_name("test")
        old_dir = os.getcwd()
        os.chdir(self.tmp_path)
        try:
            found = settings.find_config_file(".lua")
        finally:
            os.chdir(old_dir)
        self.assertEqual(found, Path(".") / "test.lua")


class BindingTests(TempDirTestCase):
    def test_bind_to_registry(self) -> None:
        path = self.write(
            """
            database = {
                host = "localhost",
                port = 5432
            }

            debug_mode = true
            """
        )
        settings = Settings()
        bind_to_registry(LoadConfig(file_path=str(path)), settings)
        self.assertEqual(settings.get_string("database.host"), "localhost")
        self.assertEqual(settings.get_int("database.port"), 5432)
        self.assertTrue(settings.get_bool("debug_mode"))

    def test_only_top_level_keys_are_set(self) -> None:
        path = self.write('return { app = { name = "x" }, debug = false }')
        registry = RecordingRegistry()
        bind_to_registry(LoadConfig(file_path=str(path)), registry)
        self.assertEqual(sorted(registry.calls), [("app", {"name": "x"}), ("debug", False)])

    def test_missing_file(self) -> None:
        settings = Settings()
        with self.assertRaises(ConfigNotFoundError):
            bind_to_registry(LoadConfig(file_path="/nonexistent/file.lua"), settings)
        self.assertEqual(settings.all_settings(), {})

    def test_failed_script_sets_nothing(self) -> None:
        path = self.write('partial = 1\nerror("stop")\n')
        registry = RecordingRegistry()
        with self.assertRaises(ExecutionError):
            bind_to_registry(LoadConfig(file_path=str(path)), registry)
        self.assertEqual(registry.calls, [])

    def test_auto_bind_converts_arrays(self) -> None:
        path = self.write(VIPER_CONFIG)
        settings = Settings()
        auto_bind_to_registry(LoadConfig(file_path=str(path)), settings)
        self.assertEqual(settings.get_string_list("features"), ["feature1", "feature2"])
        self.assertEqual(settings.get_string_list("database.names"), ["db1", "db2", "db3"])
        self.assertEqual(settings.get_string("database.host"), "localhost")
        self.assertEqual(settings.get_int("database.port"), 5432)

    def test_bind_with_arrays(self) -> None:
        path = self.write(VIPER_CONFIG)
        settings = Settings()
        bind_to_registry_with_arrays(path, settings)
        self.assertEqual(settings.get_string_list("features"), ["feature1", "feature2"])

    def test_unmarshal_after_auto_bind(self) -> None:
        path = self.write(VIPER_CONFIG)
        settings = Settings()
        auto_bind_to_registry(LoadConfig(file_path=str(path)), settings)
        config = settings.unmarshal(AppConfig)
        self.assertEqual(config.database.host, "localhost")
        self.assertEqual(config.database.port, 5432)
        self.assertEqual(config.database.names, ["db1", "db2", "db3"])
        self.assertEqual(config.features, ["feature1", "feature2"])


if __name__ == "__main__":
    unittest.main()
