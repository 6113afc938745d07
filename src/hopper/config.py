"""Registry file loading, validation, and persistence.

Schema on disk (~/.config/hopper/instances.json):

    {
        "instances": [
            {"name": "todo", "regex": "TODO|FIXME", "adjust": false, "at_end": false},
            {"name": "kw", "literals": ["foo", "bar"], "adjust": true, "at_end": true}
        ]
    }

List order is registry order.  Top-level keys prefixed with "_" are
reserved (e.g. "_example") and are ignored on load.
"""

import json
from pathlib import Path

from pydantic import BaseModel, ValidationError, model_validator

from hopper.errors import InvalidPatternError
from hopper.models import InstanceDef, LiteralPattern, PlacementRule, RegexPattern

CONFIG_PATH = Path("~/.config/hopper/instances.json").expanduser()

_README_PATH = Path("~/.config/hopper/README.md").expanduser()

_README_CONTENT = """\
# hopper configuration

`instances.json` in this directory holds your named search instances.
It is rewritten whenever you add, edit, rename or delete an instance.

## Schema

```json
{
    "instances": [
        {"name": "<name>", "regex": "<regular expression>", "adjust": false, "at_end": false},
        {"name": "<name>", "literals": ["<string>", "<string>"], "adjust": true, "at_end": true}
    ]
}
```

Each entry has exactly one of `regex` or `literals`.

- `adjust: false` leaves the cursor where the search stops (match end going
  forward, match start going backward).
- `adjust: true, at_end: false` always puts the cursor on the match start.
- `adjust: true, at_end: true` always puts the cursor on the match end.

Top-level keys prefixed with `_` are ignored by hopper.
"""


class InstanceEntry(BaseModel):
    """A single instance as stored on disk."""

    name: str
    regex: str | None = None
    literals: list[str] | None = None
    adjust: bool = False
    at_end: bool = False

    @model_validator(mode="after")
    def _one_pattern_kind(self) -> "InstanceEntry":
        if (self.regex is None) == (self.literals is None):
            raise ValueError("exactly one of 'regex' or 'literals' is required")
        return self

    def to_instance(self) -> InstanceDef:
        pattern = (
            RegexPattern(self.regex)
            if self.regex is not None
            else LiteralPattern(tuple(self.literals or ()))
        )
        return InstanceDef(
            name=self.name,
            pattern=pattern,
            placement=PlacementRule(adjust=self.adjust, at_end=self.at_end),
        )

    @classmethod
    def from_instance(cls, instance: InstanceDef) -> "InstanceEntry":
        pattern = instance.pattern
        return cls(
            name=instance.name,
            regex=pattern.pattern if isinstance(pattern, RegexPattern) else None,
            literals=list(pattern.strings) if isinstance(pattern, LiteralPattern) else None,
            adjust=instance.placement.adjust,
            at_end=instance.placement.at_end,
        )


class ConfigError(Exception):
    """Raised when instances.json exists but cannot be parsed or validated."""


def load_registry(path: Path | None = None) -> list[InstanceDef]:
    """Load and validate the registry file.

    Creates the config directory, an empty registry file, and a README on
    first run.  Raises ConfigError if the file exists but is malformed or
    names the same instance twice.
    """
    path = path or CONFIG_PATH
    if not path.exists():
        _bootstrap(path)
        return []

    text = path.read_text()
    if not text.strip():
        return []
    try:
        raw: object = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{path.name} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{path.name} must be a JSON object at the top level")

    entries = raw.get("instances", [])
    if not isinstance(entries, list):
        raise ConfigError("'instances' must be a JSON array")

    instances: list[InstanceDef] = []
    seen: set[str] = set()
    for position, data in enumerate(entries):
        try:
            instance = InstanceEntry.model_validate(data).to_instance()
        except (ValidationError, InvalidPatternError) as exc:
            raise ConfigError(f"Invalid instance #{position + 1}: {exc}") from exc
        if instance.name in seen:
            raise ConfigError(f"Instance '{instance.name}' is defined more than once")
        seen.add(instance.name)
        instances.append(instance)

    return instances


def save_registry(instances: list[InstanceDef], path: Path | None = None) -> None:
    """Persist instances to disk in order, creating directories as needed."""
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "instances": [
            InstanceEntry.from_instance(instance).model_dump(exclude_none=True)
            for instance in instances
        ]
    }
    path.write_text(json.dumps(payload, indent=2))


class JsonRegistryStore:
    """RegistryStore backed by instances.json."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path or CONFIG_PATH

    def load(self) -> list[InstanceDef]:
        return load_registry(self.path)

    def save(self, instances: list[InstanceDef]) -> None:
        save_registry(instances, self.path)


class MemoryRegistryStore:
    """In-memory RegistryStore, handy for tests and throwaway sessions."""

    def __init__(self, instances: list[InstanceDef] | None = None) -> None:
        self.saved: list[InstanceDef] = list(instances or [])
        self.save_count = 0

    def load(self) -> list[InstanceDef]:
        return list(self.saved)

    def save(self, instances: list[InstanceDef]) -> None:
        self.saved = list(instances)
        self.save_count += 1


def _bootstrap(path: Path) -> None:
    """Create the config directory, an empty registry file, and a README."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"instances": []}, indent=2) + "\n")
    readme = _README_PATH if path == CONFIG_PATH else path.parent / "README.md"
    if not readme.exists():
        readme.write_text(_README_CONTENT)


# Theme persistence
THEME_CONFIG_PATH = Path("~/.config/hopper/theme.json").expanduser()


def load_theme() -> str | None:
    """Load the saved theme preference.

    Returns the theme name if set, None otherwise.
    """
    if not THEME_CONFIG_PATH.exists():
        return None
    try:
        data = json.loads(THEME_CONFIG_PATH.read_text())
        return data.get("theme")
    except (json.JSONDecodeError, AttributeError):
        return None


def save_theme(theme: str) -> None:
    """Save the theme preference to disk."""
    THEME_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    THEME_CONFIG_PATH.write_text(json.dumps({"theme": theme}, indent=2))
