"""Canonical, collision-free metadata model of one input file."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from .asset_graph import AssetType, InputType, PropertyType
from .naming import NameVariants


@dataclass(frozen=True)
class InputDef:
    names: NameVariants
    input_type: InputType
    default_value: str


@dataclass(frozen=True)
class StateMachineDef:
    names: NameVariants
    inputs: Tuple[InputDef, ...] = ()


@dataclass(frozen=True)
class AnimationDef:
    names: NameVariants


@dataclass(frozen=True)
class TextRunDef:
    names: NameVariants
    default_value: str
    escaped_value: str


@dataclass(frozen=True)
class NestedTextRunDef:
    name: str
    path: str


@dataclass(frozen=True)
class AssetRef:
    names: NameVariants
    asset_type: AssetType
    file_extension: str
    asset_id: str
    cdn_uuid: str
    cdn_base_url: str


@dataclass(frozen=True)
class EnumValueDef:
    names: NameVariants

    @property
    def key(self) -> str:
        return self.names.name

    @property
    def needs_explicit_value(self) -> bool:
        return self.names.name != self.names.camel


@dataclass(frozen=True)
class EnumDef:
    names: NameVariants
    values: Tuple[EnumValueDef, ...] = ()


@dataclass(frozen=True)
class PropertyDef:
    names: NameVariants
    property_type: PropertyType
    backing: Optional[NameVariants] = None
    # None means the type has no default concept (view model references)
    default_value: Optional[str] = ""
    default_camel: str = ""


@dataclass(frozen=True)
class ViewModelDef:
    names: NameVariants
    properties: Tuple[PropertyDef, ...] = ()


@dataclass(frozen=True)
class ArtboardDef:
    names: NameVariants
    index: int
    view_model_id: Optional[int] = None
    view_model_name: Optional[str] = None
    default_state_machine_name: Optional[str] = None
    animations: Tuple[AnimationDef, ...] = ()
    state_machines: Tuple[StateMachineDef, ...] = ()
    text_runs: Tuple[TextRunDef, ...] = ()
    nested_text_runs: Tuple[NestedTextRunDef, ...] = ()

    @property
    def is_default(self) -> bool:
        return self.index == 0

    @property
    def has_view_model(self) -> bool:
        return self.view_model_name is not None

    @property
    def has_default_state_machine(self) -> bool:
        return self.default_state_machine_name is not None

    @property
    def has_multiple_animations(self) -> bool:
        return len(self.animations) > 1

    @property
    def has_state_machines(self) -> bool:
        return bool(self.state_machines)

    @property
    def has_multiple_state_machines(self) -> bool:
        return len(self.state_machines) > 1


@dataclass(frozen=True)
class DefaultChain:
    artboard: Optional[NameVariants] = None
    state_machine_name: Optional[str] = None
    view_model_name: Optional[str] = None

    @property
    def artboard_name(self) -> Optional[str]:
        return self.artboard.name if self.artboard else None

    @property
    def present(self) -> bool:
        return self.artboard is not None


@dataclass(frozen=True)
class GenerationFlags:
    """Aggregates that drive conditional sections of a template."""

    artboard_count: int
    total_animation_count: int
    total_state_machine_count: int
    has_view_model: bool

    @property
    def has_multiple_artboards(self) -> bool:
        return self.artboard_count > 1

    @property
    def has_multiple_animations(self) -> bool:
        return self.total_animation_count > 1

    @property
    def has_state_machines(self) -> bool:
        return self.total_state_machine_count > 0

    @property
    def has_multiple_state_machines(self) -> bool:
        return self.total_state_machine_count > 1

    @property
    def has_metadata(self) -> bool:
        return (
            self.has_multiple_artboards
            or self.has_multiple_animations
            or self.has_multiple_state_machines
        )

    @property
    def has_type_safe_switching(self) -> bool:
        # one method per axis that offers more than one concrete choice
        return (
            self.has_multiple_artboards
            or self.has_multiple_state_machines
            or (
                not self.has_view_model
                and not self.has_state_machines
                and self.has_multiple_animations
            )
        )


@dataclass(frozen=True)
class SourceAsset:
    names: NameVariants
    artboards: Tuple[ArtboardDef, ...] = ()
    enums: Tuple[EnumDef, ...] = ()
    view_models: Tuple[ViewModelDef, ...] = ()
    assets: Tuple[AssetRef, ...] = ()
    defaults: DefaultChain = DefaultChain()

    @property
    def original_file_name(self) -> str:
        return self.names.name

    def flags(self) -> GenerationFlags:
        return GenerationFlags(
            artboard_count=len(self.artboards),
            total_animation_count=sum(len(artboard.animations) for artboard in self.artboards),
            total_state_machine_count=sum(len(artboard.state_machines) for artboard in self.artboards),
            has_view_model=bool(self.view_models),
        )
