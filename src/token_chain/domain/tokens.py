"""Token definitions and usage sites extracted from a compiled stylesheet."""

from dataclasses import dataclass, field

from token_chain.domain.tiers import Tier


@dataclass(frozen=True)
class Token:
    """A custom property defined inside a root declaration block."""

    name: str
    value: str
    refs: tuple[str, ...] = ()
    line: int = 0
    layer: str | None = None
    tier: Tier = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tier", Tier.from_name(self.name))
        if not isinstance(self.refs, tuple):
            object.__setattr__(self, "refs", tuple(self.refs))


@dataclass(frozen=True)
class PrimitiveUsage:
    """A primitive referenced directly from a non-root rule."""

    token: str
    line: int
    context: str


@dataclass
class StylesheetExtraction:
    """Everything the validator needs from one stylesheet.

    ``definitions`` keeps source order; the first definition of a name wins.
    ``rule_usages`` keeps first-seen order.
    """

    definitions: dict[str, Token] = field(default_factory=dict)
    rule_usages: dict[str, None] = field(default_factory=dict)
    primitive_usages: list[PrimitiveUsage] = field(default_factory=list)

    @property
    def token_count(self) -> int:
        return len(self.definitions)

    @property
    def rule_usage_count(self) -> int:
        return len(self.rule_usages)

    def is_used_in_rules(self, name: str) -> bool:
        return name in self.rule_usages


__all__ = ["PrimitiveUsage", "StylesheetExtraction", "Token"]
