"""Read-only interface over a decoded scene graph.

The generator never looks at raw bytes. A decoder turns an input file into
an :class:`AssetFile` and everything downstream goes through the protocols
below. Accessors that follow an id or a name raise
:class:`~rive_codegen.enginelib.errors.DanglingReference` when the target
does not exist.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Protocol, Sequence


class InputType(str, Enum):
    NUMBER = "number"
    BOOLEAN = "boolean"
    TRIGGER = "trigger"
    UNKNOWN = "unknown"


class AssetType(str, Enum):
    IMAGE = "image"
    FONT = "font"
    AUDIO = "audio"
    UNKNOWN = "unknown"


class PropertyType(str, Enum):
    NONE = "none"
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    COLOR = "color"
    LIST = "list"
    ENUM = "enum"
    TRIGGER = "trigger"
    VIEW_MODEL = "viewModel"
    INTEGER = "integer"
    SYMBOL_LIST_INDEX = "symbolListIndex"
    ASSET_IMAGE = "assetImage"


class StateMachineInput(Protocol):
    name: str
    input_type: InputType

    def value(self) -> object: ...


class StateMachine(Protocol):
    name: str

    def inputs(self) -> Sequence[StateMachineInput]: ...


class TextRun(Protocol):
    name: str
    text: str


class NestedArtboard(Protocol):
    name: str

    def artboard(self) -> "Artboard": ...


class Artboard(Protocol):
    name: str
    view_model_id: Optional[int]

    def animations(self) -> Sequence[str]: ...

    def state_machines(self) -> Sequence[StateMachine]: ...

    def default_state_machine(self) -> Optional[StateMachine]: ...

    def text_runs(self) -> Sequence[TextRun]: ...

    def nested_artboards(self) -> Sequence[NestedArtboard]: ...


class FileAsset(Protocol):
    name: str
    asset_type: AssetType
    file_extension: str
    asset_id: int
    cdn_uuid: str
    cdn_base_url: str


class DataEnum(Protocol):
    name: str

    def values(self) -> Sequence[str]: ...


class PropertyDescriptor(Protocol):
    name: str
    property_type: PropertyType


class PropertyValue(Protocol):
    """Typed reads of one property on an instantiated view model."""

    def read_boolean(self) -> bool: ...

    def read_number(self) -> float: ...

    def read_string(self) -> str: ...

    def read_color(self) -> int: ...

    def read_enum_index(self) -> int: ...

    def data_enum(self) -> DataEnum: ...


class ViewModelInstance(Protocol):
    def property_value(self, name: str) -> PropertyValue: ...

    def nested_view_model(self, name: str) -> "ViewModel": ...


class ViewModel(Protocol):
    name: str

    def properties(self) -> Sequence[PropertyDescriptor]: ...

    def create_instance(self) -> ViewModelInstance: ...


class AssetFile(Protocol):
    def artboards(self) -> Sequence[Artboard]: ...

    def assets(self) -> Sequence[FileAsset]: ...

    def enums(self) -> Sequence[DataEnum]: ...

    def view_models(self) -> Sequence[ViewModel]: ...

    def artboard_view_model(self, artboard: Artboard) -> Optional[ViewModel]: ...


class AssetDecoder(Protocol):
    extension: str

    def decode(self, data: bytes, source: str) -> AssetFile: ...
