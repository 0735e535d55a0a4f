"""Match results produced by the identity resolver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union


@dataclass(frozen=True)
class ProvidedSlug:
    """The quality source named the pricing slug directly."""

    kind: Literal["provided-slug"] = "provided-slug"

    def label(self) -> str:
        return "provided-slug"


@dataclass(frozen=True)
class Alias:
    """Resolved through the alias dictionary."""

    alias_key: str
    kind: Literal["alias"] = "alias"

    def label(self) -> str:
        return f"alias:{self.alias_key}"


@dataclass(frozen=True)
class Derived:
    """Resolved from an identifier derived from the quality entry."""

    source: str
    kind: Literal["derived"] = "derived"

    def label(self) -> str:
        return f"derived:{self.source}"


@dataclass(frozen=True)
class Fuzzy:
    """Resolved by string similarity against pricing names and slugs."""

    candidate_name: str
    kind: Literal["fuzzy"] = "fuzzy"

    def label(self) -> str:
        return f"fuzzy:{self.candidate_name}"


MatchStrategy = Union[ProvidedSlug, Alias, Derived, Fuzzy]


@dataclass(frozen=True)
class MatchResult:
    """Outcome of resolving one quality entry.

    ``score`` is set exactly when ``strategy`` is :class:`Fuzzy`; the
    constructors below are the only intended way to build results.
    """

    slug: Optional[str] = None
    strategy: Optional[MatchStrategy] = None
    score: Optional[float] = None

    @classmethod
    def none(cls) -> "MatchResult":
        return cls()

    @classmethod
    def direct(cls, slug: str) -> "MatchResult":
        return cls(slug=slug, strategy=ProvidedSlug())

    @classmethod
    def alias(cls, slug: str, alias_key: str) -> "MatchResult":
        return cls(slug=slug, strategy=Alias(alias_key=alias_key))

    @classmethod
    def derived(cls, slug: str, source: str) -> "MatchResult":
        return cls(slug=slug, strategy=Derived(source=source))

    @classmethod
    def fuzzy(cls, slug: str, candidate_name: str, score: float) -> "MatchResult":
        return cls(slug=slug, strategy=Fuzzy(candidate_name=candidate_name), score=score)

    @property
    def matched(self) -> bool:
        return self.slug is not None

    def strategy_label(self) -> Optional[str]:
        if self.strategy is None:
            return None
        return self.strategy.label()


__all__ = [
    "Alias",
    "Derived",
    "Fuzzy",
    "MatchResult",
    "MatchStrategy",
    "ProvidedSlug",
]
