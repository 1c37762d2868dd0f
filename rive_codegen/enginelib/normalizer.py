"""Normalise decoded asset graphs into the canonical metadata model."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple, Union

from .asset_graph import Artboard, AssetDecoder, AssetFile, PropertyType, ViewModel
from .casing import IdentifierCaser
from .defaults import resolve_default, resolve_input_default
from .errors import DanglingReference, DecodeFailure, EmptyInput, RejectedInput, Rejection
from .escape import escape_string
from .model import (
    AnimationDef,
    ArtboardDef,
    AssetRef,
    EnumDef,
    EnumValueDef,
    InputDef,
    NestedTextRunDef,
    PropertyDef,
    SourceAsset,
    StateMachineDef,
    TextRunDef,
    ViewModelDef,
)
from .naming import NameScope, NameVariants
from .relationships import artboard_view_model, default_state_machine, resolve_defaults

logger = logging.getLogger(__name__)

PRIVATE_PREFIXES = ("internal", "private")


class Stage(str, Enum):
    OPENED = "opened"
    ENUMS_COLLECTED = "enums_collected"
    VIEW_MODELS_COLLECTED = "view_models_collected"
    ENUMS_FILTERED = "enums_filtered"
    DEFAULTS_RESOLVED = "defaults_resolved"
    ARTBOARDS_COLLECTED = "artboards_collected"
    DONE = "done"


def should_include(name: str, ignore_private: bool) -> bool:
    """False for ``_``-prefixed, ``internal*`` and ``private*`` names when filtering."""
    if not ignore_private:
        return True
    if name.startswith("_"):
        return False
    return not name.lower().startswith(PRIVATE_PREFIXES)


def find_candidate_files(path: Path | str, extension: str) -> List[Path]:
    """List input files directly inside ``path``, or ``path`` itself."""
    path = Path(path)
    if path.is_dir():
        return sorted(
            entry for entry in path.iterdir()
            if entry.is_file() and entry.name.endswith(extension)
        )
    if path.name.endswith(extension):
        return [path]
    return []


def strip_extension(path: Path, extension: str) -> str:
    name = path.name
    if extension and name.endswith(extension):
        return name[: -len(extension)]
    return path.stem


@dataclass
class BatchResult:
    input_files: List[Path] = field(default_factory=list)
    assets: List[SourceAsset] = field(default_factory=list)
    rejections: List[Rejection] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.rejections

    def summary(self) -> Dict[str, object]:
        return {
            "ok": self.ok,
            "count": len(self.assets),
            "files": [asset.original_file_name for asset in self.assets],
            "rejected": [rejection.summary() for rejection in self.rejections],
        }


class MetadataNormalizer:
    """Walk one asset graph end to end and build its :class:`SourceAsset`."""

    def __init__(self, caser: Optional[IdentifierCaser] = None, ignore_private: bool = False):
        self.caser = caser or IdentifierCaser()
        self.ignore_private = ignore_private
        self.stage = Stage.OPENED

    def _advance(self, stage: Stage, file_name: str):
        self.stage = stage
        logger.debug("%s: %s", file_name, stage.value)

    def _include(self, kind: str, name: str) -> bool:
        if should_include(name, self.ignore_private):
            return True
        logger.debug("Skipping private %s %r", kind, name)
        return False

    # ----------------------- orchestration -----------------------
    def normalize(self, asset_file: AssetFile, file_name: str) -> SourceAsset:
        self._advance(Stage.OPENED, file_name)
        assets = self._collect_assets(asset_file)
        enums = self._collect_enums(asset_file)
        self._advance(Stage.ENUMS_COLLECTED, file_name)

        used_enums: Set[str] = set()
        view_models = self._collect_view_models(asset_file, used_enums)
        self._advance(Stage.VIEW_MODELS_COLLECTED, file_name)

        if self.ignore_private and view_models:
            enums = tuple(item for item in enums if item.names.name in used_enums)
        self._advance(Stage.ENUMS_FILTERED, file_name)

        defaults = resolve_defaults(asset_file, self.caser)
        self._advance(Stage.DEFAULTS_RESOLVED, file_name)

        artboards = self._collect_artboards(asset_file, view_models)
        self._advance(Stage.ARTBOARDS_COLLECTED, file_name)

        source = SourceAsset(
            names=NameVariants.of(file_name, self.caser),
            artboards=artboards,
            enums=enums,
            view_models=view_models,
            assets=assets,
            defaults=defaults,
        )
        self._advance(Stage.DONE, file_name)
        return source

    # ----------------------- assets & enums -----------------------
    def _collect_assets(self, asset_file: AssetFile) -> Tuple[AssetRef, ...]:
        scope = NameScope(self.caser)
        refs = []
        for asset in asset_file.assets():
            name = scope.claim_raw(asset.name)
            refs.append(
                AssetRef(
                    names=NameVariants.of(name, self.caser),
                    asset_type=asset.asset_type,
                    file_extension=asset.file_extension,
                    asset_id=str(asset.asset_id),
                    cdn_uuid=asset.cdn_uuid,
                    cdn_base_url=asset.cdn_base_url,
                )
            )
        return tuple(refs)

    def _collect_enums(self, asset_file: AssetFile) -> Tuple[EnumDef, ...]:
        return tuple(
            EnumDef(
                names=NameVariants.of(data_enum.name, self.caser),
                values=tuple(
                    EnumValueDef(names=NameVariants.of(key, self.caser))
                    for key in data_enum.values()
                ),
            )
            for data_enum in asset_file.enums()
        )

    # ----------------------- view models -----------------------
    def _collect_view_models(self, asset_file: AssetFile, used_enums: Set[str]) -> Tuple[ViewModelDef, ...]:
        collected = []
        for view_model in asset_file.view_models():
            if not self._include("view model", view_model.name):
                continue
            properties = []
            for descriptor in view_model.properties():
                if not self._include("property", descriptor.name):
                    continue
                prop = self._property(view_model, descriptor.name, descriptor.property_type, used_enums)
                if prop is not None:
                    properties.append(prop)
            collected.append(
                ViewModelDef(names=NameVariants.of(view_model.name, self.caser), properties=tuple(properties))
            )
        return tuple(collected)

    def _property(
        self,
        view_model: ViewModel,
        name: str,
        property_type: PropertyType,
        used_enums: Set[str],
    ) -> Optional[PropertyDef]:
        names = NameVariants.of(name, self.caser)
        try:
            instance = view_model.create_instance()
        except DanglingReference as exc:
            logger.debug("Cannot instantiate view model %r: %s", view_model.name, exc)
            instance = None

        if property_type is PropertyType.VIEW_MODEL:
            backing = None
            if instance is not None:
                try:
                    nested = instance.nested_view_model(name)
                except DanglingReference as exc:
                    logger.warning("View model property %r of %r is dangling: %s", name, view_model.name, exc)
                else:
                    if not self._include("nested view model", nested.name):
                        return None
                    backing = NameVariants.of(nested.name, self.caser)
            return PropertyDef(names=names, property_type=property_type, backing=backing, default_value=None)

        accessor = None
        if instance is not None:
            try:
                accessor = instance.property_value(name)
            except DanglingReference as exc:
                logger.debug("No value for property %r of %r: %s", name, view_model.name, exc)

        if property_type is PropertyType.ENUM:
            backing = None
            if accessor is not None:
                try:
                    enum_name = accessor.data_enum().name
                except DanglingReference as exc:
                    logger.warning("Enum property %r of %r is dangling: %s", name, view_model.name, exc)
                else:
                    used_enums.add(enum_name)
                    backing = NameVariants.of(enum_name, self.caser)
            default = resolve_default(property_type, accessor) or ""
            return PropertyDef(
                names=names,
                property_type=property_type,
                backing=backing,
                default_value=default,
                default_camel=self.caser.camel(default) if default else "",
            )

        return PropertyDef(
            names=names,
            property_type=property_type,
            default_value=resolve_default(property_type, accessor),
        )

    # ----------------------- artboards -----------------------
    def _collect_artboards(
        self,
        asset_file: AssetFile,
        view_models: Sequence[ViewModelDef],
    ) -> Tuple[ArtboardDef, ...]:
        scope = NameScope(self.caser)
        collected = []
        for index, artboard in enumerate(asset_file.artboards()):
            if not self._include("artboard", artboard.name):
                continue
            state_machine = default_state_machine(artboard)
            collected.append(
                ArtboardDef(
                    names=scope.claim(artboard.name),
                    index=index,
                    view_model_id=artboard.view_model_id,
                    view_model_name=artboard_view_model(artboard.view_model_id, view_models),
                    default_state_machine_name=state_machine.name if state_machine is not None else None,
                    animations=self._animations(artboard),
                    state_machines=self._state_machines(artboard),
                    text_runs=self._text_runs(artboard),
                    nested_text_runs=tuple(self._nested_text_runs(artboard, "", [])),
                )
            )
        return tuple(collected)

    def _animations(self, artboard: Artboard) -> Tuple[AnimationDef, ...]:
        scope = NameScope(self.caser)
        return tuple(
            AnimationDef(names=scope.claim(name))
            for name in artboard.animations()
            if self._include("animation", name)
        )

    def _state_machines(self, artboard: Artboard) -> Tuple[StateMachineDef, ...]:
        scope = NameScope(self.caser)
        machines = []
        for machine in artboard.state_machines():
            if not self._include("state machine", machine.name):
                continue
            input_scope = NameScope(self.caser)
            inputs = tuple(
                InputDef(
                    names=input_scope.claim(item.name),
                    input_type=item.input_type,
                    default_value=resolve_input_default(item),
                )
                for item in machine.inputs()
            )
            machines.append(StateMachineDef(names=scope.claim(machine.name), inputs=inputs))
        return tuple(machines)

    def _text_runs(self, artboard: Artboard) -> Tuple[TextRunDef, ...]:
        scope = NameScope(self.caser)
        return tuple(
            TextRunDef(
                names=scope.claim(run.name),
                default_value=run.text,
                escaped_value=escape_string(run.text),
            )
            for run in artboard.text_runs()
            if run.name
        )

    def _nested_text_runs(self, artboard: Artboard, path: str, stack: List[int]) -> List[NestedTextRunDef]:
        """Depth-first walk of nested artboards; unnamed ones add no path segment."""
        results: List[NestedTextRunDef] = []
        if path:
            results.extend(NestedTextRunDef(name=run.name, path=path) for run in artboard.text_runs() if run.name)
        stack.append(id(artboard))
        for nested in artboard.nested_artboards():
            try:
                child = nested.artboard()
            except DanglingReference as exc:
                logger.warning("Nested artboard %r of %r is dangling: %s", nested.name, artboard.name, exc)
                continue
            if id(child) in stack:
                logger.warning("Artboard %r nests itself through %r, not following", child.name, nested.name)
                continue
            child_path = path
            if nested.name:
                child_path = f"{path}/{nested.name}" if path else nested.name
            results.extend(self._nested_text_runs(child, child_path, stack))
        stack.pop()
        return results


def process_file(
    path: Path | str,
    decoder: AssetDecoder,
    caser: Optional[IdentifierCaser] = None,
    ignore_private: bool = False,
) -> Union[SourceAsset, Rejection]:
    """Decode and normalise one input file, or describe why it was rejected."""
    path = Path(path)
    try:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise DecodeFailure(path, exc.strerror or str(exc)) from exc
        if not data:
            raise EmptyInput(path)
        asset_file = decoder.decode(data, str(path))
    except RejectedInput as error:
        logger.error("%s", error)
        return Rejection.from_error(error)
    normalizer = MetadataNormalizer(caser=caser, ignore_private=ignore_private)
    return normalizer.normalize(asset_file, strip_extension(path, decoder.extension))


def process_batch(
    paths: Sequence[Path],
    decoder: AssetDecoder,
    caser: Optional[IdentifierCaser] = None,
    ignore_private: bool = False,
) -> BatchResult:
    result = BatchResult(input_files=list(paths))
    for path in paths:
        outcome = process_file(path, decoder, caser=caser, ignore_private=ignore_private)
        if isinstance(outcome, Rejection):
            result.rejections.append(outcome)
        else:
            result.assets.append(outcome)
    return result
