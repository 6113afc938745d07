"""Unit tests for registry file loading, validation, and persistence."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from hopper.config import (
    ConfigError,
    InstanceEntry,
    JsonRegistryStore,
    load_registry,
    save_registry,
)
from hopper.errors import PersistenceError
from hopper.models import InstanceDef, LiteralPattern, PlacementRule, RegexPattern
from hopper.registry import InstanceRegistry


def _write(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestInstanceEntry:
    def test_regex_entry(self):
        """
        Given a regex entry
        When converted to an InstanceDef
        Then pattern and placement are carried over
        """
        entry = InstanceEntry(name="todo", regex="TODO", adjust=True, at_end=True)
        instance = entry.to_instance()
        assert instance == InstanceDef("todo", RegexPattern("TODO"), PlacementRule.end())

    def test_both_pattern_kinds_raises(self):
        with pytest.raises(ValidationError):
            InstanceEntry.model_validate({"name": "x", "regex": "a", "literals": ["a"]})

    def test_neither_pattern_kind_raises(self):
        with pytest.raises(ValidationError):
            InstanceEntry.model_validate({"name": "x"})

    def test_from_instance_omits_other_kind(self):
        entry = InstanceEntry.from_instance(InstanceDef("kw", LiteralPattern(("foo",))))
        assert entry.model_dump(exclude_none=True) == {
            "name": "kw",
            "literals": ["foo"],
            "adjust": False,
            "at_end": False,
        }


class TestLoadRegistry:
    def test_returns_empty_when_file_missing(self, tmp_path: Path, monkeypatch):
        """
        Given no registry file exists
        When load_registry is called
        Then it returns an empty list and creates the file and README
        """
        cfg_path = tmp_path / "instances.json"
        readme_path = tmp_path / "README.md"
        monkeypatch.setattr("hopper.config.CONFIG_PATH", cfg_path)
        monkeypatch.setattr("hopper.config._README_PATH", readme_path)

        assert load_registry() == []
        assert cfg_path.exists()
        assert readme_path.exists()
        assert json.loads(cfg_path.read_text()) == {"instances": []}

    def test_empty_file_returns_empty(self, tmp_path: Path):
        cfg_path = tmp_path / "instances.json"
        cfg_path.write_text("")
        assert load_registry(cfg_path) == []

    def test_valid_file_keeps_order(self, tmp_path: Path):
        cfg_path = tmp_path / "instances.json"
        _write(
            cfg_path,
            {
                "instances": [
                    {"name": "b", "regex": "b+"},
                    {"name": "a", "literals": ["x", "y"], "adjust": True},
                ]
            },
        )

        result = load_registry(cfg_path)

        assert [i.name for i in result] == ["b", "a"]
        assert result[1].pattern == LiteralPattern(("x", "y"))
        assert result[1].placement == PlacementRule.start()

    def test_underscore_keys_are_ignored(self, tmp_path: Path):
        cfg_path = tmp_path / "instances.json"
        _write(cfg_path, {"_example": {"anything": 1}, "instances": [{"name": "a", "regex": "a"}]})
        assert [i.name for i in load_registry(cfg_path)] == ["a"]

    def test_invalid_json_raises_config_error(self, tmp_path: Path):
        cfg_path = tmp_path / "instances.json"
        cfg_path.write_text("{not valid json}")
        with pytest.raises(ConfigError, match="not valid JSON"):
            load_registry(cfg_path)

    def test_non_object_root_raises_config_error(self, tmp_path: Path):
        cfg_path = tmp_path / "instances.json"
        _write(cfg_path, [])
        with pytest.raises(ConfigError, match="top level"):
            load_registry(cfg_path)

    def test_non_list_instances_raises_config_error(self, tmp_path: Path):
        cfg_path = tmp_path / "instances.json"
        _write(cfg_path, {"instances": {"name": "a"}})
        with pytest.raises(ConfigError, match="array"):
            load_registry(cfg_path)

    def test_invalid_entry_names_its_position(self, tmp_path: Path):
        """
        Given the second entry is missing its name
        When load_registry is called
        Then a ConfigError naming entry #2 is raised
        """
        cfg_path = tmp_path / "instances.json"
        _write(cfg_path, {"instances": [{"name": "a", "regex": "a"}, {"regex": "b"}]})
        with pytest.raises(ConfigError, match="#2"):
            load_registry(cfg_path)

    def test_empty_literal_list_raises_config_error(self, tmp_path: Path):
        cfg_path = tmp_path / "instances.json"
        _write(cfg_path, {"instances": [{"name": "a", "literals": [""]}]})
        with pytest.raises(ConfigError, match="literal"):
            load_registry(cfg_path)

    def test_duplicate_names_raise_config_error(self, tmp_path: Path):
        cfg_path = tmp_path / "instances.json"
        _write(cfg_path, {"instances": [{"name": "a", "regex": "a"}, {"name": "a", "regex": "b"}]})
        with pytest.raises(ConfigError, match="more than once"):
            load_registry(cfg_path)


class TestSaveRegistry:
    def test_round_trip(self, tmp_path: Path):
        """
        Given regex and literal instances with every placement
        When saved and loaded again
        Then the loaded list equals the original, order included
        """
        cfg_path = tmp_path / "instances.json"
        original = [
            InstanceDef("z", RegexPattern(r"\bz\w*"), PlacementRule.natural()),
            InstanceDef("kw", LiteralPattern(("foo", "bar")), PlacementRule.end()),
            InstanceDef("a", RegexPattern("a"), PlacementRule.start()),
        ]
        save_registry(original, cfg_path)
        assert load_registry(cfg_path) == original

    def test_creates_parent_directory(self, tmp_path: Path):
        cfg_path = tmp_path / "nested" / "dir" / "instances.json"
        save_registry([], cfg_path)
        assert cfg_path.exists()

    def test_defaults_to_config_path(self, tmp_path: Path, monkeypatch):
        cfg_path = tmp_path / "instances.json"
        monkeypatch.setattr("hopper.config.CONFIG_PATH", cfg_path)
        save_registry([InstanceDef("a", RegexPattern("a"))])
        assert json.loads(cfg_path.read_text())["instances"][0]["name"] == "a"


class TestJsonRegistryStore:
    def test_registry_mutations_are_written(self, tmp_path: Path):
        """
        Given a registry bound to a JSON store
        When instances are added, renamed and deleted
        Then the file always mirrors the registry
        """
        store = JsonRegistryStore(tmp_path / "instances.json")
        registry = InstanceRegistry.from_store(store)
        registry.add("a", RegexPattern("a"))
        registry.add("b", LiteralPattern(("b",)))
        registry.rename("a", "first")
        registry.delete("b")

        assert [i.name for i in store.load()] == ["first"]

    def test_unwritable_path_surfaces_persistence_error(self, tmp_path: Path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        store = JsonRegistryStore(blocker / "instances.json")
        registry = InstanceRegistry(store=store)

        with pytest.raises(PersistenceError):
            registry.add("a", RegexPattern("a"))
        assert len(registry) == 0
