"""Observable state and configuration store.

The store holds the endpoint configuration read once at start-up and is
written to as the session observes the television.
"""

from __future__ import annotations

import json
import logging
import os
from importlib import resources
from pathlib import Path
from typing import Any, Protocol

import yaml
from jsonschema import ValidationError, validators

from braviactl.core.errors import StateStoreError

LOGGER = logging.getLogger(__name__)

CONNECTED = "Connected"
DISPLAY_IS_ON = "DisplayIsOn"
VOLUME = "Volume"
MUTE = "Mute"
MODEL = "Model"
MAC = "MAC"
IP = "IP"
PSK = "PSK"
DEBUG_ENABLED = "DebugEnabled"


class StateStore(Protocol):
    def get(self, name: str) -> str | None:
        """Return the stored value or None when the name was never set."""

    def set(self, name: str, value: str) -> None:
        """Store value under name."""


def read_flag(store: StateStore, name: str) -> bool:
    value = store.get(name)
    return value not in (None, "", "0")


def write_flag(store: StateStore, name: str, status: bool) -> str:
    value = "1" if status else "0"
    store.set(name, value)
    return value


class MemoryStateStore:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})
        self.writes: list[tuple[str, str]] = []

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        value = str(value)
        if self._values.get(name) == value:
            return
        LOGGER.debug("%s --> %s", value, name)
        self._values[name] = value
        self.writes.append((name, value))

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)


_TEXT_TAGS = {"tag:yaml.org,2002:bool", "tag:yaml.org,2002:int", "tag:yaml.org,2002:float"}


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys and reads every scalar as text."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag not in _TEXT_TAGS
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise StateStoreError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


def default_state_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "braviactl" / "state.yaml"


def _load_schema_validator() -> Any:
    schema_text = resources.files("braviactl.schemas").joinpath("state.schema.json").read_text(
        encoding="utf-8"
    )
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


class YamlStateStore(MemoryStateStore):
    """State store persisted to a YAML file, rewritten whenever a value changes."""

    def __init__(self, path: Path | None = None) -> None:
        self.path = path or default_state_path()
        super().__init__(self._read())

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            content = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StateStoreError(f"Could not read state file {self.path}: {exc}") from exc

        try:
            loaded = yaml.load(content, Loader=UniqueKeyLoader)
        except yaml.YAMLError as exc:
            raise StateStoreError(f"Invalid YAML in {self.path}: {exc}") from exc

        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            raise StateStoreError(f"State file {self.path} must contain a mapping at root")
        loaded = {key: "" if value is None else value for key, value in loaded.items()}

        validator = _load_schema_validator()
        try:
            validator.validate(loaded)
        except ValidationError as exc:
            path = ".".join(str(p) for p in exc.path)
            where = f" ({path})" if path else ""
            raise StateStoreError(f"Schema validation failed for {self.path}{where}: {exc.message}") from exc

        return {key: str(value) for key, value in loaded.items()}

    def set(self, name: str, value: str) -> None:
        before = len(self.writes)
        super().set(name, value)
        if len(self.writes) != before:
            self._write()

    def _write(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(
                yaml.safe_dump(self.snapshot(), default_flow_style=False, sort_keys=True),
                encoding="utf-8",
            )
        except OSError as exc:
            raise StateStoreError(f"Could not write state file {self.path}: {exc}") from exc
