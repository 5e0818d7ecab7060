from enum import Enum
from typing import Iterable, Optional

from autoresponder.services.errors import ForbiddenError


class Plan(str, Enum):
    BASIC = "basic"
    PRO = "pro"
    PREMIUM = "premium"


class Capability(str, Enum):
    AI_FALLBACK = "ai_fallback"
    ADVANCED_FEATURES = "advanced_features"


# Each capability lists its plans explicitly; premium gets nothing implicitly from pro.
CAPABILITY_PLANS: dict[Capability, frozenset[Plan]] = {
    Capability.AI_FALLBACK: frozenset({Plan.PRO, Plan.PREMIUM}),
    Capability.ADVANCED_FEATURES: frozenset({Plan.PRO, Plan.PREMIUM}),
}


def parse_plan(value: object) -> Optional[Plan]:
    """Return the Plan for a stored or claimed value, None when unrecognized."""
    if isinstance(value, Plan):
        return value
    if not isinstance(value, str):
        return None
    try:
        return Plan(value.strip().lower())
    except ValueError:
        return None


def plans_for(capability: Capability) -> frozenset[Plan]:
    return CAPABILITY_PLANS.get(capability, frozenset())


def has_capability(plan: object, capability: Capability) -> bool:
    parsed = parse_plan(plan)
    return parsed is not None and parsed in plans_for(capability)


def authorize(principal, allowed_plans: Iterable[Plan]) -> None:
    """Raise ForbiddenError unless the principal's plan is in ``allowed_plans``."""
    allowed = {parse_plan(plan) for plan in allowed_plans}
    plan = parse_plan(getattr(principal, "plan", None))
    if plan is None or plan not in allowed:
        raise ForbiddenError("Your plan does not include this feature")
