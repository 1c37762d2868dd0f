"""Literal default values for view model properties and state machine inputs."""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from .asset_graph import InputType, PropertyType, PropertyValue, StateMachineInput

logger = logging.getLogger(__name__)


def format_number(value: float) -> str:
    return f"{float(value):f}"


def format_color(value: int) -> str:
    return f"0x{int(value) & 0xFFFFFFFF:08X}"


def _enum_key(accessor: PropertyValue) -> str:
    index = accessor.read_enum_index()
    values = accessor.data_enum().values()
    if 0 <= index < len(values):
        return values[index]
    return ""


def _empty(accessor: PropertyValue) -> str:
    return ""


_READERS: Dict[PropertyType, Optional[Callable[[PropertyValue], str]]] = {
    PropertyType.BOOLEAN: lambda accessor: "true" if accessor.read_boolean() else "false",
    PropertyType.NUMBER: lambda accessor: format_number(accessor.read_number()),
    PropertyType.STRING: lambda accessor: accessor.read_string(),
    PropertyType.COLOR: lambda accessor: format_color(accessor.read_color()),
    PropertyType.ENUM: _enum_key,
    PropertyType.ASSET_IMAGE: _empty,
    PropertyType.TRIGGER: _empty,
    PropertyType.NONE: _empty,
    PropertyType.LIST: _empty,
    PropertyType.INTEGER: _empty,
    PropertyType.SYMBOL_LIST_INDEX: _empty,
    # references to other view models carry no default at all
    PropertyType.VIEW_MODEL: None,
}


def resolve_default(property_type: PropertyType, accessor: Optional[PropertyValue]) -> Optional[str]:
    """Read the default of one property; never raises.

    Returns ``None`` for view model references and ``""`` whenever the
    value cannot be read.
    """
    reader = _READERS[property_type]
    if reader is None:
        return None
    if accessor is None:
        return ""
    try:
        return reader(accessor)
    except (LookupError, TypeError, ValueError, ArithmeticError) as exc:
        logger.debug("Unreadable %s default: %s", property_type.value, exc)
        return ""


def resolve_input_default(item: StateMachineInput) -> str:
    input_type = item.input_type
    if input_type is InputType.TRIGGER:
        return "false"
    if input_type is InputType.UNKNOWN:
        return ""
    try:
        value = item.value()
        if input_type is InputType.NUMBER:
            return format_number(value)
        return "true" if value else "false"
    except (TypeError, ValueError, ArithmeticError) as exc:
        logger.debug("Unreadable default of input %r: %s", item.name, exc)
        return ""
