"""Collision-free naming within a single scope."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Set

from .casing import IdentifierCaser

UNIQUE_SUFFIX = "U"


def resolve_unique(candidate: str, used: Set[str]) -> str:
    """Return ``candidate`` or the first free ``candidateU<n>`` and claim it."""
    unique = candidate
    counter = 1
    while unique in used:
        unique = f"{candidate}{UNIQUE_SUFFIX}{counter}"
        counter += 1
    used.add(unique)
    return unique


@dataclass(frozen=True)
class NameVariants:
    """A raw name and its four identifier shapes."""

    name: str
    camel: str
    pascal: str
    snake: str
    kebab: str

    @classmethod
    def of(cls, raw: str, caser: IdentifierCaser) -> "NameVariants":
        return cls(
            name=raw,
            camel=caser.camel(raw),
            pascal=caser.pascal(raw),
            snake=caser.snake(raw),
            kebab=caser.kebab(raw),
        )


class NameScope:
    """One naming scope: every camel identifier handed out is unique in it.

    A collision appends the ``U<n>`` suffix as an extra token of the raw
    name, so ``Idle`` twice yields ``idle`` and ``idleU1``. Reserved-word
    rewriting only touches the camel form: ``class`` twice gives camel
    ``classValueU1`` next to pascal ``ClassU1``, mirroring ``classValue``
    and ``Class`` for the first claim.
    """

    def __init__(self, caser: IdentifierCaser):
        self.caser = caser
        self.used: Set[str] = set()

    def claim(self, raw: str) -> NameVariants:
        base = self.caser.camel(raw)
        key = resolve_unique(base, self.used)
        if key == base:
            return NameVariants.of(raw, self.caser)
        suffix = key[len(base):]
        suffixed = f"{raw} {suffix}"
        return NameVariants(
            name=raw,
            camel=key,
            pascal=self.caser.pascal(suffixed),
            snake=self.caser.snake(suffixed),
            kebab=self.caser.kebab(suffixed),
        )

    def claim_raw(self, raw: str) -> str:
        """Unique the raw name itself; asset names keep the suffix.

        The camel form of the returned name is free in this scope too.
        """
        candidate = raw
        counter = 1
        while self.caser.camel(candidate) in self.used:
            candidate = f"{raw}{UNIQUE_SUFFIX}{counter}"
            counter += 1
        self.used.add(self.caser.camel(candidate))
        return candidate
