"""Argument list entities."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

MASK = "****"


@dataclass(frozen=True)
class ArgumentList:
    """Ordered JMeter command line tokens plus the values to hide in logs."""

    tokens: tuple[str, ...]
    masked_values: frozenset[str] = frozenset()

    def loggable(self) -> tuple[str, ...]:
        """Return the tokens with every masked value replaced by a fixed placeholder."""
        return tuple(MASK if token in self.masked_values else token for token in self.tokens)

    def __iter__(self) -> Iterator[str]:
        return iter(self.tokens)

    def __len__(self) -> int:
        return len(self.tokens)

    def __contains__(self, token: object) -> bool:
        return token in self.tokens


@dataclass
class ArgumentCollector:
    """Mutable builder used while composing one ArgumentList."""

    tokens: list[str] = field(default_factory=list)
    masked_values: set[str] = field(default_factory=set)

    def add(self, *tokens: str) -> None:
        self.tokens.extend(tokens)

    def add_secret(self, flag: str, value: str) -> None:
        self.tokens.extend((flag, value))
        self.masked_values.add(value)

    def build(self) -> ArgumentList:
        return ArgumentList(tokens=tuple(self.tokens), masked_values=frozenset(self.masked_values))
