"""Identity resolution from quality entries onto pricing slugs."""

from modelcurator.resolution.resolver import IdentityResolver
from modelcurator.resolution.types import MatchResult, MatchStrategy

__all__ = ["IdentityResolver", "MatchResult", "MatchStrategy"]
