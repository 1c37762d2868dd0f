"""Metadata normalisation and template-data construction for scene graphs."""

from .casing import CaseStyle, IdentifierCaser, ReservedWordRegistry, case_convert
from .errors import (
    CodegenError,
    ConfigError,
    DanglingReference,
    DecodeFailure,
    EmptyInput,
    NoInputFound,
    Rejection,
    RejectionReason,
    TemplateError,
)
from .escape import escape_string
from .naming import NameScope, NameVariants, resolve_unique
from .normalizer import MetadataNormalizer, find_candidate_files, process_batch, process_file
from .projection import ExpressionProjector, LogicLessProjector
from .scene_document import SceneDocumentDecoder
from .state_store import StateStore

__all__ = [
    "CaseStyle",
    "IdentifierCaser",
    "ReservedWordRegistry",
    "case_convert",
    "CodegenError",
    "ConfigError",
    "DanglingReference",
    "DecodeFailure",
    "EmptyInput",
    "NoInputFound",
    "Rejection",
    "RejectionReason",
    "TemplateError",
    "escape_string",
    "NameScope",
    "NameVariants",
    "resolve_unique",
    "MetadataNormalizer",
    "find_candidate_files",
    "process_batch",
    "process_file",
    "ExpressionProjector",
    "LogicLessProjector",
    "SceneDocumentDecoder",
    "StateStore",
]
