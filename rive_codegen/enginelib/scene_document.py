"""Asset graph backed by a scene document (a YAML/JSON dump of a scene graph)."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from .asset_graph import AssetType, InputType, PropertyType
from .errors import DanglingReference, DecodeFailure

logger = logging.getLogger(__name__)

DEFAULT_SCHEMA_FILE = Path(__file__).resolve().parents[1] / "schemas" / "schema.scene.json"
SCENE_EXTENSION = ".scene.yaml"


def _coerce(enum_cls, value: Any, fallback):
    try:
        return enum_cls(value)
    except ValueError:
        logger.debug("Unrecognised %s %r, using %s", enum_cls.__name__, value, fallback.value)
        return fallback


def _to_float(value: Any, name: str) -> float:
    try:
        return float(value)
    except OverflowError:
        raise ValueError(f"Value of {name!r} is out of range for a number") from None


# ----------------------- state machines -----------------------
@dataclass
class DocumentInput:
    name: str
    input_type: InputType
    raw_value: Any = None

    def value(self) -> object:
        if self.input_type is InputType.NUMBER:
            return _to_float(self.raw_value or 0, self.name)
        if self.input_type is InputType.BOOLEAN:
            return bool(self.raw_value)
        return self.raw_value


@dataclass
class DocumentStateMachine:
    name: str
    _inputs: List[DocumentInput] = field(default_factory=list)

    def inputs(self) -> List[DocumentInput]:
        return list(self._inputs)


@dataclass
class DocumentTextRun:
    name: str
    text: str = ""


@dataclass
class DocumentNestedArtboard:
    name: str
    target: str
    document: "SceneDocument" = field(repr=False, default=None)

    def artboard(self) -> "DocumentArtboard":
        return self.document.artboard_named(self.target)


@dataclass
class DocumentArtboard:
    name: str
    view_model_id: Optional[int] = None
    default_state_machine_name: Optional[str] = None
    _animations: List[str] = field(default_factory=list)
    _state_machines: List[DocumentStateMachine] = field(default_factory=list)
    _text_runs: List[DocumentTextRun] = field(default_factory=list)
    _nested: List[DocumentNestedArtboard] = field(default_factory=list)

    def animations(self) -> List[str]:
        return list(self._animations)

    def state_machines(self) -> List[DocumentStateMachine]:
        return list(self._state_machines)

    def default_state_machine(self) -> Optional[DocumentStateMachine]:
        if not self.default_state_machine_name:
            return None
        for state_machine in self._state_machines:
            if state_machine.name == self.default_state_machine_name:
                return state_machine
        raise DanglingReference(
            f"Artboard {self.name!r} has no state machine {self.default_state_machine_name!r}"
        )

    def text_runs(self) -> List[DocumentTextRun]:
        return list(self._text_runs)

    def nested_artboards(self) -> List[DocumentNestedArtboard]:
        return list(self._nested)


# ----------------------- assets & enums -----------------------
@dataclass
class DocumentAsset:
    name: str
    asset_type: AssetType
    file_extension: str = ""
    asset_id: int = 0
    cdn_uuid: str = ""
    cdn_base_url: str = ""


@dataclass
class DocumentEnum:
    name: str
    _values: List[str] = field(default_factory=list)

    def values(self) -> List[str]:
        return list(self._values)


# ----------------------- view models -----------------------
@dataclass
class DocumentProperty:
    name: str
    property_type: PropertyType
    raw_type: str = ""
    value: Any = None
    enum_name: Optional[str] = None
    view_model_name: Optional[str] = None


class DocumentPropertyValue:
    """Typed reads over the literal value stored with a property."""

    def __init__(self, prop: DocumentProperty, document: "SceneDocument"):
        self.prop = prop
        self.document = document

    def read_boolean(self) -> bool:
        value = self.prop.value
        if value is None:
            return False
        if not isinstance(value, bool):
            raise TypeError(f"Property {self.prop.name!r} does not hold a boolean")
        return value

    def read_number(self) -> float:
        value = self.prop.value
        if value is None:
            return 0.0
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"Property {self.prop.name!r} does not hold a number")
        return _to_float(value, self.prop.name)

    def read_string(self) -> str:
        value = self.prop.value
        if value is None:
            return ""
        if not isinstance(value, str):
            raise TypeError(f"Property {self.prop.name!r} does not hold a string")
        return value

    def read_color(self) -> int:
        value = self.prop.value
        if value is None:
            return 0
        if isinstance(value, str):
            value = int(value, 16)
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Property {self.prop.name!r} does not hold a color")
        # stored the way the runtime reads it: a signed 32-bit ARGB value
        value &= 0xFFFFFFFF
        return value - 0x100000000 if value & 0x80000000 else value

    def read_enum_index(self) -> int:
        value = self.prop.value
        if value is None:
            return 0
        if isinstance(value, str):
            return self.data_enum().values().index(value)
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"Property {self.prop.name!r} does not hold an enum index")
        return value

    def data_enum(self) -> DocumentEnum:
        if not self.prop.enum_name:
            raise DanglingReference(f"Property {self.prop.name!r} names no enum")
        return self.document.enum_named(self.prop.enum_name)


class DocumentViewModelInstance:
    def __init__(self, view_model: "DocumentViewModel", document: "SceneDocument"):
        self.view_model = view_model
        self.document = document

    def _property(self, name: str) -> DocumentProperty:
        for prop in self.view_model._properties:
            if prop.name == name:
                return prop
        raise DanglingReference(f"View model {self.view_model.name!r} has no property {name!r}")

    def property_value(self, name: str) -> DocumentPropertyValue:
        return DocumentPropertyValue(self._property(name), self.document)

    def nested_view_model(self, name: str) -> "DocumentViewModel":
        prop = self._property(name)
        if not prop.view_model_name:
            raise DanglingReference(f"Property {name!r} names no view model")
        return self.document.view_model_named(prop.view_model_name)


@dataclass
class DocumentViewModel:
    name: str
    _properties: List[DocumentProperty] = field(default_factory=list)
    document: "SceneDocument" = field(repr=False, default=None)

    def properties(self) -> List[DocumentProperty]:
        return list(self._properties)

    def create_instance(self) -> DocumentViewModelInstance:
        return DocumentViewModelInstance(self, self.document)


# ----------------------- document -----------------------
class SceneDocument:
    """In-memory asset graph built from a validated scene document."""

    def __init__(self, payload: Dict[str, Any]):
        self._artboards = [self._artboard(entry) for entry in payload.get("artboards", [])]
        self._assets = [
            DocumentAsset(
                name=entry["name"],
                asset_type=_coerce(AssetType, entry.get("type", "unknown"), AssetType.UNKNOWN),
                file_extension=entry.get("extension", ""),
                asset_id=int(entry.get("id", 0)),
                cdn_uuid=entry.get("cdn_uuid", ""),
                cdn_base_url=entry.get("cdn_base_url", ""),
            )
            for entry in payload.get("assets", [])
        ]
        self._enums = [
            DocumentEnum(name=entry["name"], _values=list(entry.get("values", [])))
            for entry in payload.get("enums", [])
        ]
        self._view_models = [
            DocumentViewModel(
                name=entry["name"],
                _properties=[self._property(prop) for prop in entry.get("properties", [])],
                document=self,
            )
            for entry in payload.get("view_models", [])
        ]

    def _artboard(self, entry: Dict[str, Any]) -> DocumentArtboard:
        return DocumentArtboard(
            name=entry["name"],
            view_model_id=entry.get("view_model_id"),
            default_state_machine_name=entry.get("default_state_machine"),
            _animations=list(entry.get("animations", [])),
            _state_machines=[
                DocumentStateMachine(
                    name=machine["name"],
                    _inputs=[
                        DocumentInput(
                            name=item["name"],
                            input_type=_coerce(InputType, item["type"], InputType.UNKNOWN),
                            raw_value=item.get("value"),
                        )
                        for item in machine.get("inputs", [])
                    ],
                )
                for machine in entry.get("state_machines", [])
            ],
            _text_runs=[
                DocumentTextRun(name=run["name"], text=run.get("text", ""))
                for run in entry.get("text_runs", [])
            ],
            _nested=[
                DocumentNestedArtboard(name=nested.get("name", ""), target=nested["artboard"], document=self)
                for nested in entry.get("nested_artboards", [])
            ],
        )

    @staticmethod
    def _property(entry: Dict[str, Any]) -> DocumentProperty:
        return DocumentProperty(
            name=entry["name"],
            property_type=_coerce(PropertyType, entry["type"], PropertyType.NONE),
            raw_type=entry["type"],
            value=entry.get("value"),
            enum_name=entry.get("enum"),
            view_model_name=entry.get("view_model"),
        )

    # ----------------------- asset graph api -----------------------
    def artboards(self) -> List[DocumentArtboard]:
        return list(self._artboards)

    def assets(self) -> List[DocumentAsset]:
        return list(self._assets)

    def enums(self) -> List[DocumentEnum]:
        return list(self._enums)

    def view_models(self) -> List[DocumentViewModel]:
        return list(self._view_models)

    def artboard_view_model(self, artboard: DocumentArtboard) -> Optional[DocumentViewModel]:
        index = artboard.view_model_id
        if index is None or not 0 <= index < len(self._view_models):
            return None
        return self._view_models[index]

    # ----------------------- lookups -----------------------
    def artboard_named(self, name: str) -> DocumentArtboard:
        for artboard in self._artboards:
            if artboard.name == name:
                return artboard
        raise DanglingReference(f"No artboard named {name!r}")

    def enum_named(self, name: str) -> DocumentEnum:
        for data_enum in self._enums:
            if data_enum.name == name:
                return data_enum
        raise DanglingReference(f"No enum named {name!r}")

    def view_model_named(self, name: str) -> DocumentViewModel:
        for view_model in self._view_models:
            if view_model.name == name:
                return view_model
        raise DanglingReference(f"No view model named {name!r}")


class SceneDocumentDecoder:
    """Decode scene documents and validate them against the JSON schema."""

    extension = SCENE_EXTENSION

    def __init__(self, schema_file: Optional[Path] = None):
        self.schema_file = Path(schema_file) if schema_file is not None else DEFAULT_SCHEMA_FILE
        with open(self.schema_file, "r", encoding="utf-8") as handle:
            self.schema = json.load(handle)

    def decode(self, data: bytes, source: str) -> SceneDocument:
        try:
            payload = yaml.safe_load(data.decode("utf-8"))
        except (UnicodeDecodeError, yaml.YAMLError) as exc:
            detail = str(exc).splitlines()
            raise DecodeFailure(source, detail[0] if detail else "") from exc
        if not isinstance(payload, dict):
            raise DecodeFailure(source, "document root must be a mapping")
        try:
            jsonschema.validate(payload, self.schema)
        except ValidationError as err:
            raise DecodeFailure(source, err.message) from err
        return SceneDocument(payload)
