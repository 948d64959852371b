"""
Unit tests for the entitlement resolver.
"""
import pytest

from aeolytics.core.exceptions import NotEntitledError
from aeolytics.services.entitlements import (
    PLAN_LIMITS,
    Feature,
    available_engines,
    can_access_feature,
    can_use_engine,
    filter_engines,
    plan_priority,
    require_feature,
    resolve_limits,
)


class TestResolveLimits:
    """Test plan to limits resolution."""

    def test_free_plan(self):
        """Test free plan."""
        limits = resolve_limits("free")

        assert limits.max_queries == 50
        assert limits.max_domains == 1
        assert limits.allowed_engines == ("ChatGPT",)
        assert limits.daily_runs == 5

    def test_pro_plan(self):
        """Test pro plan."""
        limits = resolve_limits("pro")

        assert limits.max_queries == 1000
        assert limits.max_domains == 5
        assert set(limits.allowed_engines) == {"ChatGPT", "Perplexity", "Gemini"}

    def test_agency_plan(self):
        """Test agency plan."""
        limits = resolve_limits("agency")

        assert limits.max_queries == 10000
        assert limits.max_domains == 10
        assert limits.features[Feature.WHITELABEL_REPORTS] is True

    @pytest.mark.parametrize("plan", ["enterprise", "", None, "FREE"])
    def test_unknown_plan_falls_back_to_free(self, plan):
        """Test unknown plan falls back to free."""
        assert resolve_limits(plan) == PLAN_LIMITS["free"]

    def test_every_plan_defines_every_feature(self):
        """Test every plan defines every feature."""
        feature_sets = {frozenset(limits.features) for limits in PLAN_LIMITS.values()}
        assert len(feature_sets) == 1


class TestEngines:
    """Test engine entitlement checks."""

    def test_can_use_engine(self):
        """Test can use engine."""
        assert can_use_engine("free", "ChatGPT") is True
        assert can_use_engine("free", "Perplexity") is False
        assert can_use_engine("pro", "Gemini") is True

    def test_copilot_is_not_offered(self):
        """Test copilot is not offered."""
        assert "Copilot" not in available_engines("agency")

    def test_filter_drops_engines_outside_plan(self):
        """Test filter drops engines outside plan."""
        assert filter_engines("free", ["ChatGPT", "Perplexity"]) == ["ChatGPT"]

    def test_filter_keeps_order_and_removes_duplicates(self):
        """Test filter keeps order and removes duplicates."""
        result = filter_engines("pro", ["Gemini", "ChatGPT", "Gemini"])
        assert result == ["Gemini", "ChatGPT"]

    def test_filter_can_return_empty(self):
        """Test filter can return empty."""
        assert filter_engines("free", ["Gemini"]) == []


class TestFeatures:
    """Test feature gating."""

    def test_free_plan_has_no_features(self):
        """Test free plan has no features."""
        assert not any(
            can_access_feature("free", feature)
            for feature in PLAN_LIMITS["free"].features
        )

    def test_unknown_feature_is_denied(self):
        """Test unknown feature is denied."""
        assert can_access_feature("agency", "timeTravel") is False

    def test_require_feature_passes(self):
        """Test require feature passes."""
        require_feature("pro", Feature.FIX_IT_BRIEFS)

    def test_require_feature_raises(self):
        """Test require feature raises."""
        with pytest.raises(NotEntitledError) as exc_info:
            require_feature("pro", Feature.WHITELABEL_REPORTS)

        assert exc_info.value.status_code == 403
        assert exc_info.value.detail["code"] == "not_entitled"
        assert exc_info.value.detail["feature"] == Feature.WHITELABEL_REPORTS

    def test_plan_priority(self):
        """Test plan priority."""
        assert plan_priority("free") == "low"
        assert plan_priority("pro") == "normal"
        assert plan_priority("agency") == "high"
        assert plan_priority("mystery") == "low"
