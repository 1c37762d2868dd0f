"""Serialise the canonical model into the data trees consumed by templates.

Two projections exist. :class:`LogicLessProjector` targets mustache: every
conditional a template needs is precomputed as a boolean and optional keys
are simply left out. :class:`ExpressionProjector` targets jinja: the same
content, but every key is always present and list items also carry their
``index`` so templates can compute on them.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from .asset_graph import PropertyType
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
from .naming import NameVariants

GENERATED_FILE_NAME = "rive_generated"

Tree = Dict[str, Any]


def name_fields(prefix: str, names: Optional[NameVariants], raw_key: Optional[str] = None) -> Tree:
    """``<prefix>_name`` plus ``<prefix>_<case>_case`` for the four case styles."""
    if names is None:
        names = NameVariants(name="", camel="", pascal="", snake="", kebab="")
    return {
        raw_key or f"{prefix}_name": names.name,
        f"{prefix}_camel_case": names.camel,
        f"{prefix}_pascal_case": names.pascal,
        f"{prefix}_snake_case": names.snake,
        f"{prefix}_kebab_case": names.kebab,
    }


def _type_flags(property_type: PropertyType) -> Tree:
    return {
        "is_view_model": property_type is PropertyType.VIEW_MODEL,
        "is_enum": property_type is PropertyType.ENUM,
        "is_string": property_type is PropertyType.STRING,
        "is_number": property_type is PropertyType.NUMBER,
        "is_integer": property_type is PropertyType.INTEGER,
        "is_boolean": property_type is PropertyType.BOOLEAN,
        "is_color": property_type is PropertyType.COLOR,
        "is_list": property_type is PropertyType.LIST,
        "is_image": property_type is PropertyType.ASSET_IMAGE,
        "is_trigger": property_type is PropertyType.TRIGGER,
    }


def _flag_fields(asset: SourceAsset) -> Tree:
    flags = asset.flags()
    return {
        "artboard_count": flags.artboard_count,
        "has_multiple_artboards": flags.has_multiple_artboards,
        "total_animation_count": flags.total_animation_count,
        "has_multiple_animations": flags.has_multiple_animations,
        "total_state_machine_count": flags.total_state_machine_count,
        "has_state_machines": flags.has_state_machines,
        "has_multiple_state_machines": flags.has_multiple_state_machines,
        "has_metadata": flags.has_metadata,
        "has_view_model": flags.has_view_model,
        "has_type_safe_switching": flags.has_type_safe_switching,
    }


class LogicLessProjector:
    """Flat tree for logic-less templates: repeat sections and booleans only."""

    def project_batch(self, assets: Sequence[SourceAsset]) -> Tree:
        return {
            "generated_file_name": GENERATED_FILE_NAME,
            "riv_files": self._items(assets, self.project),
        }

    @staticmethod
    def _items(items: Sequence[Any], build) -> List[Tree]:
        total = len(items)
        projected = []
        for index, item in enumerate(items):
            data = build(item)
            data["last"] = index == total - 1
            projected.append(data)
        return projected

    # ----------------------- file -----------------------
    def project(self, asset: SourceAsset) -> Tree:
        data = name_fields("riv", asset.names, raw_key="riv_original_file_name")
        defaults = asset.defaults
        data.update(
            {
                "has_defaults": defaults.present,
                "default_artboard_name": defaults.artboard.name if defaults.artboard else "",
                "default_artboard_camel_case": defaults.artboard.camel if defaults.artboard else "",
                "default_state_machine_name": defaults.state_machine_name or "",
                "default_view_model_name": defaults.view_model_name or "",
                "enums": self._items(asset.enums, self._enum),
                "view_models": self._view_models(asset.view_models),
                "assets": self._items(asset.assets, self._asset),
                "artboards": self._items(asset.artboards, self._artboard),
            }
        )
        data.update(_flag_fields(asset))
        return data

    # ----------------------- enums & view models -----------------------
    def _enum(self, item: EnumDef) -> Tree:
        data = name_fields("enum", item.names)
        data["enum_values"] = self._items(item.values, self._enum_value)
        return data

    def _enum_value(self, value: EnumValueDef) -> Tree:
        data = name_fields("enum_value", value.names, raw_key="enum_value_key")
        if value.needs_explicit_value:
            data["enum_value_needs_explicit_value"] = True
        return data

    def _view_models(self, view_models: Sequence[ViewModelDef]) -> List[Tree]:
        projected = self._items(view_models, self._view_model)
        for index, data in enumerate(projected):
            data["is_first"] = index == 0
        return projected

    def _view_model(self, view_model: ViewModelDef) -> Tree:
        data = name_fields("view_model", view_model.names)
        data["properties"] = self._items(view_model.properties, self._property)
        return data

    def _property(self, prop: PropertyDef) -> Tree:
        data = name_fields("property", prop.names)
        type_data = _type_flags(prop.property_type)
        type_data.update(name_fields("backing", prop.backing))
        if prop.default_value:
            type_data["default_value"] = prop.default_value
            if prop.property_type is PropertyType.ENUM:
                type_data["enum_default_value"] = prop.default_value
                type_data["enum_default_value_camel"] = prop.default_camel
        data["property_type"] = type_data
        return data

    # ----------------------- assets -----------------------
    def _asset(self, asset: AssetRef) -> Tree:
        data = name_fields("asset", asset.names)
        data.update(
            {
                "asset_type": asset.asset_type.value,
                "asset_file_extension": asset.file_extension,
                "asset_id": asset.asset_id,
                "asset_cdn_uuid": asset.cdn_uuid,
                "asset_cdn_base_url": asset.cdn_base_url,
            }
        )
        return data

    # ----------------------- artboards -----------------------
    def _artboard(self, artboard: ArtboardDef) -> Tree:
        data = name_fields("artboard", artboard.names)
        data.update(
            {
                "is_default": artboard.is_default,
                "view_model_id": -1 if artboard.view_model_id is None else artboard.view_model_id,
                "view_model_name": artboard.view_model_name or "",
                "has_view_model": artboard.has_view_model,
                "default_state_machine_name": artboard.default_state_machine_name or "",
                "has_default_state_machine": artboard.has_default_state_machine,
                "has_multiple_animations": artboard.has_multiple_animations,
                "has_state_machines": artboard.has_state_machines,
                "has_multiple_state_machines": artboard.has_multiple_state_machines,
                "animations": self._items(artboard.animations, self._animation),
                "state_machines": self._items(artboard.state_machines, self._state_machine),
                "text_value_runs": self._items(artboard.text_runs, self._text_run),
                "nested_text_value_runs": self._items(artboard.nested_text_runs, self._nested_text_run),
            }
        )
        return data

    def _animation(self, animation: AnimationDef) -> Tree:
        return name_fields("animation", animation.names)

    def _state_machine(self, machine: StateMachineDef) -> Tree:
        data = name_fields("state_machine", machine.names)
        data["inputs"] = self._items(machine.inputs, self._input)
        return data

    def _input(self, item: InputDef) -> Tree:
        data = name_fields("input", item.names)
        data["input_type"] = item.input_type.value
        data["input_default_value"] = item.default_value
        return data

    def _text_run(self, run: TextRunDef) -> Tree:
        data = name_fields("text_value_run", run.names)
        data["text_value_run_default"] = run.default_value
        data["text_value_run_default_sanitized"] = run.escaped_value
        return data

    def _nested_text_run(self, run: NestedTextRunDef) -> Tree:
        return {
            "nested_text_value_run_name": run.name,
            "nested_text_value_run_path": run.path,
        }


class ExpressionProjector:
    """Tree for expression-capable templates.

    Keys match :class:`LogicLessProjector`, but optional values are always
    present (empty strings or ``False``), every list item carries ``index``,
    ``is_first`` and ``last``, and properties expose ``property_type_name``.
    """

    def project_batch(self, assets: Sequence[SourceAsset]) -> Tree:
        return {
            "generated_file_name": GENERATED_FILE_NAME,
            "riv_files": self._items(assets, self.project),
        }

    @staticmethod
    def _items(items: Sequence[Any], build) -> List[Tree]:
        total = len(items)
        return [
            dict(build(item), index=index, is_first=index == 0, last=index == total - 1)
            for index, item in enumerate(items)
        ]

    def project(self, asset: SourceAsset) -> Tree:
        defaults = asset.defaults
        return {
            **name_fields("riv", asset.names, raw_key="riv_original_file_name"),
            "has_defaults": defaults.present,
            "default_artboard_name": defaults.artboard.name if defaults.artboard else "",
            "default_artboard_camel_case": defaults.artboard.camel if defaults.artboard else "",
            "default_state_machine_name": defaults.state_machine_name or "",
            "has_default_state_machine": defaults.state_machine_name is not None,
            "default_view_model_name": defaults.view_model_name or "",
            "has_default_view_model": defaults.view_model_name is not None,
            "enums": self._items(
                asset.enums,
                lambda item: {
                    **name_fields("enum", item.names),
                    "enum_values": self._items(
                        item.values,
                        lambda value: {
                            **name_fields("enum_value", value.names, raw_key="enum_value_key"),
                            "enum_value_needs_explicit_value": value.needs_explicit_value,
                        },
                    ),
                },
            ),
            "view_models": self._items(
                asset.view_models,
                lambda view_model: {
                    **name_fields("view_model", view_model.names),
                    "properties": self._items(view_model.properties, self._property),
                },
            ),
            "assets": self._items(
                asset.assets,
                lambda item: {
                    **name_fields("asset", item.names),
                    "asset_type": item.asset_type.value,
                    "asset_file_extension": item.file_extension,
                    "asset_id": item.asset_id,
                    "asset_cdn_uuid": item.cdn_uuid,
                    "asset_cdn_base_url": item.cdn_base_url,
                },
            ),
            "artboards": self._items(asset.artboards, self._artboard),
            **_flag_fields(asset),
        }

    def _property(self, prop: PropertyDef) -> Tree:
        default = prop.default_value or ""
        is_enum = prop.property_type is PropertyType.ENUM
        return {
            **name_fields("property", prop.names),
            "property_type_name": prop.property_type.value,
            "property_type": {
                **_type_flags(prop.property_type),
                **name_fields("backing", prop.backing),
                "has_default_value": bool(default),
                "default_value": default,
                "enum_default_value": default if is_enum else "",
                "enum_default_value_camel": prop.default_camel if is_enum else "",
            },
        }

    def _artboard(self, artboard: ArtboardDef) -> Tree:
        return {
            **name_fields("artboard", artboard.names),
            "is_default": artboard.is_default,
            "view_model_id": -1 if artboard.view_model_id is None else artboard.view_model_id,
            "view_model_name": artboard.view_model_name or "",
            "has_view_model": artboard.has_view_model,
            "default_state_machine_name": artboard.default_state_machine_name or "",
            "has_default_state_machine": artboard.has_default_state_machine,
            "has_multiple_animations": artboard.has_multiple_animations,
            "has_state_machines": artboard.has_state_machines,
            "has_multiple_state_machines": artboard.has_multiple_state_machines,
            "animations": self._items(artboard.animations, lambda item: name_fields("animation", item.names)),
            "state_machines": self._items(
                artboard.state_machines,
                lambda machine: {
                    **name_fields("state_machine", machine.names),
                    "inputs": self._items(
                        machine.inputs,
                        lambda item: {
                            **name_fields("input", item.names),
                            "input_type": item.input_type.value,
                            "input_default_value": item.default_value,
                        },
                    ),
                },
            ),
            "text_value_runs": self._items(
                artboard.text_runs,
                lambda run: {
                    **name_fields("text_value_run", run.names),
                    "text_value_run_default": run.default_value,
                    "text_value_run_default_sanitized": run.escaped_value,
                },
            ),
            "nested_text_value_runs": self._items(
                artboard.nested_text_runs,
                lambda run: {
                    "nested_text_value_run_name": run.name,
                    "nested_text_value_run_path": run.path,
                },
            ),
        }
