"""Token tiers and the allowed-reference table.

Tiers form the chain primitive → semantic → component. ``base`` is a
code-only structural contract that component tokens may consume locally but
that an external source may never define or reference. Both the local rule
engine and the external ingestion gate read from the one table below.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Final


class Tier(str, Enum):
    PRIMITIVE = "primitive"
    SEMANTIC = "semantic"
    COMPONENT = "component"
    BASE = "base"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> "Tier":
        """Classify a custom property name (``--semantic-color-x``) by prefix."""
        for tier in _PREFIXED_TIERS:
            if name.startswith(f"--{tier.value}-"):
                return tier
        return cls.UNKNOWN

    @classmethod
    def from_segment(cls, segment: str) -> "Tier | None":
        """Map a bare first name segment (``semantic``) to a tier, if any."""
        try:
            tier = cls(segment)
        except ValueError:
            return None
        return None if tier is cls.UNKNOWN else tier


_PREFIXED_TIERS: Final = (Tier.PRIMITIVE, Tier.SEMANTIC, Tier.COMPONENT, Tier.BASE)

# The chain itself. Every tier must appear here.
_CHAIN: Final[Mapping[Tier, frozenset[Tier]]] = {
    Tier.PRIMITIVE: frozenset(),
    Tier.SEMANTIC: frozenset({Tier.PRIMITIVE}),
    Tier.COMPONENT: frozenset({Tier.SEMANTIC}),
    Tier.BASE: frozenset({Tier.SEMANTIC}),
    Tier.UNKNOWN: frozenset(Tier),
}

# Grants that only hold for code-owned stylesheets.
_CODE_ONLY_GRANTS: Final[Mapping[Tier, frozenset[Tier]]] = {
    Tier.COMPONENT: frozenset({Tier.BASE}),
}

CODE_ONLY_TIERS: Final = frozenset({Tier.BASE})


@dataclass(frozen=True)
class TierPolicy:
    """Allowed reference tiers per tier, plus the tiers a source may define."""

    name: str
    allowed: Mapping[Tier, frozenset[Tier]]
    definable: frozenset[Tier]

    def allowed_for(self, tier: Tier) -> frozenset[Tier]:
        return self.allowed.get(tier, frozenset())

    def allows(self, tier: Tier, referenced: Tier) -> bool:
        return referenced in self.allowed_for(tier)

    def can_define(self, tier: Tier) -> bool:
        return tier in self.definable

    def describe_allowed(self, tier: Tier) -> str:
        """Human-readable allowed set for error messages."""
        allowed = self.allowed_for(tier)
        if not allowed:
            return "nothing (raw values only)"
        return ", ".join(t.value for t in Tier if t in allowed)


def build_policy(*, include_code_only: bool) -> TierPolicy:
    """Derive a policy from the shared chain.

    Args:
        include_code_only: True for the compiled stylesheet, which may use the
            ``base`` contract and unprefixed names. False for external
            sources, which are restricted to primitive/semantic/component.
    """
    missing = set(Tier) - set(_CHAIN)
    if missing:
        raise ValueError(f"Tier chain is missing entries for: {sorted(t.value for t in missing)}")

    allowed: dict[Tier, frozenset[Tier]] = {}
    for tier, refs in _CHAIN.items():
        if include_code_only:
            allowed[tier] = refs | _CODE_ONLY_GRANTS.get(tier, frozenset())
        elif tier not in CODE_ONLY_TIERS and tier is not Tier.UNKNOWN:
            allowed[tier] = refs - CODE_ONLY_TIERS

    if include_code_only:
        return TierPolicy(
            name="local",
            allowed=MappingProxyType(allowed),
            definable=frozenset(Tier),
        )
    return TierPolicy(
        name="external",
        allowed=MappingProxyType(allowed),
        definable=frozenset(allowed),
    )


LOCAL_POLICY: Final = build_policy(include_code_only=True)
EXTERNAL_POLICY: Final = build_policy(include_code_only=False)

# Tiers an external source manages; everything else is never diffed.
EXTERNAL_TIERS: Final = EXTERNAL_POLICY.definable


__all__ = [
    "CODE_ONLY_TIERS",
    "EXTERNAL_POLICY",
    "EXTERNAL_TIERS",
    "LOCAL_POLICY",
    "Tier",
    "TierPolicy",
    "build_policy",
]
