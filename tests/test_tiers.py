"""Tests for tier classification and the allowed-reference table."""

import pytest

from token_chain.domain.tiers import (
    EXTERNAL_POLICY,
    EXTERNAL_TIERS,
    LOCAL_POLICY,
    Tier,
    build_policy,
)


class TestTierClassification:
    @pytest.mark.parametrize(
        ("name", "tier"),
        [
            ("--primitive-color-blue-600", Tier.PRIMITIVE),
            ("--semantic-color-brand", Tier.SEMANTIC),
            ("--component-button-bg", Tier.COMPONENT),
            ("--base-z-index-modal", Tier.BASE),
            ("--brand-blue", Tier.UNKNOWN),
            ("--primitive", Tier.UNKNOWN),
        ],
    )
    def test_from_name(self, name, tier):
        assert Tier.from_name(name) is tier

    def test_from_segment(self):
        assert Tier.from_segment("semantic") is Tier.SEMANTIC
        assert Tier.from_segment("base") is Tier.BASE
        assert Tier.from_segment("unknown") is None
        assert Tier.from_segment("brand") is None


class TestLocalPolicy:
    def test_chain(self):
        assert LOCAL_POLICY.allowed_for(Tier.PRIMITIVE) == frozenset()
        assert LOCAL_POLICY.allowed_for(Tier.SEMANTIC) == {Tier.PRIMITIVE}
        assert LOCAL_POLICY.allowed_for(Tier.COMPONENT) == {Tier.SEMANTIC, Tier.BASE}
        assert LOCAL_POLICY.allowed_for(Tier.BASE) == {Tier.SEMANTIC}

    def test_unknown_may_reference_anything(self):
        for tier in Tier:
            assert LOCAL_POLICY.allows(Tier.UNKNOWN, tier)

    def test_describe_allowed(self):
        assert LOCAL_POLICY.describe_allowed(Tier.PRIMITIVE) == "nothing (raw values only)"
        assert LOCAL_POLICY.describe_allowed(Tier.COMPONENT) == "semantic, base"


class TestExternalPolicy:
    def test_external_tiers(self):
        assert EXTERNAL_TIERS == {Tier.PRIMITIVE, Tier.SEMANTIC, Tier.COMPONENT}

    def test_base_is_code_only(self):
        assert not EXTERNAL_POLICY.allows(Tier.COMPONENT, Tier.BASE)
        assert not EXTERNAL_POLICY.can_define(Tier.BASE)
        assert EXTERNAL_POLICY.allowed_for(Tier.BASE) == frozenset()

    def test_component_may_only_reference_semantic(self):
        assert EXTERNAL_POLICY.allowed_for(Tier.COMPONENT) == {Tier.SEMANTIC}
        assert EXTERNAL_POLICY.describe_allowed(Tier.COMPONENT) == "semantic"

    def test_external_is_a_restriction_of_local(self):
        for tier, allowed in EXTERNAL_POLICY.allowed.items():
            assert allowed <= LOCAL_POLICY.allowed_for(tier)

    def test_build_policy_is_deterministic(self):
        assert build_policy(include_code_only=False) == EXTERNAL_POLICY
        assert build_policy(include_code_only=True) == LOCAL_POLICY
