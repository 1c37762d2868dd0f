"""Default artboard, state machine and view model relationships."""
from __future__ import annotations

import logging
from typing import Optional, Sequence

from .asset_graph import Artboard, AssetFile, StateMachine
from .casing import IdentifierCaser
from .errors import DanglingReference
from .model import DefaultChain, ViewModelDef
from .naming import NameVariants

logger = logging.getLogger(__name__)


def default_state_machine(artboard: Artboard) -> Optional[StateMachine]:
    try:
        return artboard.default_state_machine()
    except DanglingReference as exc:
        logger.debug("Ignoring default state machine of %r: %s", artboard.name, exc)
        return None


def resolve_defaults(asset_file: AssetFile, caser: Optional[IdentifierCaser] = None) -> DefaultChain:
    """The first artboard is the default; its state machine and view model are optional."""
    artboards = asset_file.artboards()
    if not artboards:
        return DefaultChain()
    artboard = artboards[0]
    state_machine = default_state_machine(artboard)
    try:
        view_model = asset_file.artboard_view_model(artboard)
    except DanglingReference as exc:
        logger.debug("Ignoring view model of %r: %s", artboard.name, exc)
        view_model = None
    return DefaultChain(
        artboard=NameVariants.of(artboard.name, caser or IdentifierCaser()),
        state_machine_name=state_machine.name if state_machine is not None else None,
        view_model_name=view_model.name if view_model is not None else None,
    )


def artboard_view_model(view_model_id: Optional[int], view_models: Sequence[ViewModelDef]) -> Optional[str]:
    """Treat the artboard's view model id as an index into ``view_models``."""
    if view_model_id is None or not 0 <= view_model_id < len(view_models):
        return None
    return view_models[view_model_id].names.name
