import pytest

from autoresponder.services.auth_service import Principal
from autoresponder.services.errors import ForbiddenError
from autoresponder.services.plans import (
    Capability,
    Plan,
    authorize,
    has_capability,
    parse_plan,
    plans_for,
)

PAID_PLANS = {Plan.PRO, Plan.PREMIUM}


def _principal(plan: Plan) -> Principal:
    return Principal(account_id=1, email="a@example.com", plan=plan)


class TestParsePlan:
    def test_parses_known_values(self):
        assert parse_plan("basic") == Plan.BASIC
        assert parse_plan(" PRO ") == Plan.PRO
        assert parse_plan(Plan.PREMIUM) == Plan.PREMIUM

    def test_unknown_values_return_none(self):
        assert parse_plan("gold") is None
        assert parse_plan(None) is None
        assert parse_plan(3) is None


class TestAuthorize:
    def test_basic_is_forbidden_for_paid_features(self):
        with pytest.raises(ForbiddenError):
            authorize(_principal(Plan.BASIC), PAID_PLANS)

    @pytest.mark.parametrize("plan", [Plan.PRO, Plan.PREMIUM])
    def test_paid_plans_are_allowed(self, plan):
        authorize(_principal(plan), PAID_PLANS)

    def test_premium_does_not_imply_pro_only_set(self):
        with pytest.raises(ForbiddenError):
            authorize(_principal(Plan.PREMIUM), {Plan.PRO})

    def test_accepts_plan_strings_in_allowed_set(self):
        authorize(_principal(Plan.PRO), {"pro"})

    def test_forbidden_error_maps_to_403(self):
        with pytest.raises(ForbiddenError) as exc:
            authorize(_principal(Plan.BASIC), PAID_PLANS)
        assert exc.value.status_code == 403


class TestCapabilities:
    def test_ai_fallback_plans(self):
        assert plans_for(Capability.AI_FALLBACK) == frozenset(PAID_PLANS)

    def test_has_capability(self):
        assert has_capability("pro", Capability.AI_FALLBACK) is True
        assert has_capability("premium", Capability.AI_FALLBACK) is True
        assert has_capability("basic", Capability.AI_FALLBACK) is False
        assert has_capability("unknown", Capability.AI_FALLBACK) is False
