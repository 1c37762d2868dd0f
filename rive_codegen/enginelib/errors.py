"""Error taxonomy shared by the code generator core."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class CodegenError(Exception):
    """Base class for all generator errors."""


class RejectedInput(CodegenError):
    """A single input file could not be turned into an asset graph."""

    reason: "RejectionReason"

    def __init__(self, path: Path | str, message: str):
        super().__init__(f"{message}: {path}")
        self.path = Path(path)
        self.message = message


class EmptyInput(RejectedInput):
    def __init__(self, path: Path | str):
        super().__init__(path, "Input file is empty")


class DecodeFailure(RejectedInput):
    def __init__(self, path: Path | str, detail: str = ""):
        message = "Failed to decode input file"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(path, message)


class DanglingReference(CodegenError, LookupError):
    """An id or name inside the asset graph does not resolve."""


class NoInputFound(CodegenError):
    """No candidate file matched the required extension."""

    def __init__(self, path: Path | str, extension: str):
        super().__init__(f"No {extension} files found in {path}")
        self.path = Path(path)
        self.extension = extension


class ConfigError(CodegenError, ValueError):
    pass


class TemplateError(CodegenError):
    pass


class RejectionReason(str, Enum):
    EMPTY_INPUT = "empty_input"
    DECODE_FAILURE = "decode_failure"


EmptyInput.reason = RejectionReason.EMPTY_INPUT
DecodeFailure.reason = RejectionReason.DECODE_FAILURE


@dataclass(frozen=True)
class Rejection:
    path: Path
    reason: RejectionReason
    message: str

    @classmethod
    def from_error(cls, error: RejectedInput) -> "Rejection":
        return cls(path=error.path, reason=error.reason, message=error.message)

    def summary(self) -> dict:
        return {"path": str(self.path), "reason": self.reason.value, "message": self.message}
