"""Identifier casing and per-language reserved word tables."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, FrozenSet, List, Optional

import yaml

from .errors import ConfigError

DEFAULT_RESERVED_WORDS_FILE = Path(__file__).resolve().parents[1] / "resources" / "reserved_words.yaml"

DIGIT_PREFIX = "n"
FALLBACK_PREFIX = "X"

_SEPARATORS = re.compile(r"[ _-]+")
_NON_TOKEN = re.compile(r"[^A-Za-z0-9]")


class CaseStyle(str, Enum):
    CAMEL = "camel"
    PASCAL = "pascal"
    SNAKE = "snake"
    KEBAB = "kebab"


def _tokens(raw: str) -> List[str]:
    tokens = []
    for chunk in _SEPARATORS.split(raw):
        token = _NON_TOKEN.sub("", chunk)
        if token:
            tokens.append(token)
    return tokens


def _capitalize(token: str) -> str:
    return token[:1].upper() + token[1:].lower()


def case_convert(raw: str, style: CaseStyle) -> str:
    """Convert ``raw`` into an identifier of the given case style.

    Letters and digits form tokens, spaces, underscores and hyphens separate
    them and every other character is dropped. A name starting with a digit
    is prefixed with ``n``; anything that still does not start with a letter
    gets an ``X`` in front.
    """
    tokens = _tokens(raw)
    leading_digit = raw[:1].isdigit() and raw[:1].isascii()
    if style in (CaseStyle.CAMEL, CaseStyle.PASCAL):
        parts = []
        for index, token in enumerate(tokens):
            if index == 0 and style is CaseStyle.CAMEL and not leading_digit:
                parts.append(token.lower())
            else:
                parts.append(_capitalize(token))
        result = "".join(parts)
    else:
        joiner = "_" if style is CaseStyle.SNAKE else "-"
        result = joiner.join(token.lower() for token in tokens)
    if leading_digit:
        result = DIGIT_PREFIX + result
        if style is CaseStyle.PASCAL:
            result = result[:1].upper() + result[1:]
    if not result or not (result[0].isascii() and result[0].isalpha()):
        result = FALLBACK_PREFIX + result
    return result


@dataclass(frozen=True)
class ReservedWords:
    language: str
    words: FrozenSet[str] = frozenset()
    suffix: str = "Value"

    def rewrite(self, identifier: str) -> str:
        if identifier in self.words:
            return identifier + self.suffix
        return identifier


@dataclass(frozen=True)
class IdentifierCaser:
    """Case converter bound to the reserved words of one target language."""

    reserved: ReservedWords = field(default_factory=lambda: ReservedWords(language="none"))

    def camel(self, raw: str) -> str:
        return self.reserved.rewrite(case_convert(raw, CaseStyle.CAMEL))

    def pascal(self, raw: str) -> str:
        return case_convert(raw, CaseStyle.PASCAL)

    def snake(self, raw: str) -> str:
        return case_convert(raw, CaseStyle.SNAKE)

    def kebab(self, raw: str) -> str:
        return case_convert(raw, CaseStyle.KEBAB)

    def convert(self, raw: str, style: CaseStyle) -> str:
        if style is CaseStyle.CAMEL:
            return self.camel(raw)
        return case_convert(raw, style)


class ReservedWordRegistry:
    """Load reserved word tables keyed by target language from a YAML file."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else DEFAULT_RESERVED_WORDS_FILE
        self._tables: Dict[str, ReservedWords] = {}
        self.active_name: Optional[str] = None
        self._load()

    def _load(self):
        with open(self.path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
        languages = data.get("languages", {})
        if not isinstance(languages, dict):
            raise ConfigError(f"'languages' must be a mapping in {self.path}")
        for name, entry in languages.items():
            entry = entry or {}
            self._tables[str(name)] = ReservedWords(
                language=str(name),
                words=frozenset(str(word) for word in entry.get("words", [])),
                suffix=str(entry.get("suffix", "Value")),
            )

    def set_active(self, name: str) -> Dict[str, object]:
        if name not in self._tables:
            raise ConfigError(f"Unknown target language: {name}")
        self.active_name = name
        return self.status()

    def status(self) -> Dict[str, object]:
        return {
            "active": self.active_name,
            "available": sorted(self._tables.keys()),
        }

    def get(self, name: str) -> ReservedWords:
        try:
            return self._tables[name]
        except KeyError:
            raise ConfigError(f"Unknown target language: {name}") from None

    def caser(self, name: Optional[str] = None) -> IdentifierCaser:
        language = name or self.active_name
        if language is None:
            return IdentifierCaser()
        return IdentifierCaser(self.get(language))
