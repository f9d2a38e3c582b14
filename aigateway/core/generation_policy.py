"""Generation policy — maps a subscription plan to request parameters.

The gateway knows nothing about plans; callers use this module to turn
(plan, feature) into a GenerationRequest. Quota counting lives with the
billing layer, not here.
"""

from __future__ import annotations

from enum import Enum

from aigateway.gateway.types import GenerationRequest


class PlanType(str, Enum):
    FREE = "free"
    PRO = "pro"
    PREMIUM = "premium"


class AIDepth(str, Enum):
    BASIC = "basic"
    MEDIUM = "medium"
    HIGH = "high"


class Feature(str, Enum):
    RESUME_ANALYZER = "resume_analyzer"
    RESUME_COMPARISON = "resume_comparison"
    INTERVIEW_QUESTIONS = "interview_questions"
    COMPANY_COMPATIBILITY = "company_compatibility"
    RESUME_EXPORTS = "resume_exports"
    ATS_RESUME_GENERATOR = "ats_resume_generator"


class FeatureLockedError(Exception):
    """Raised when a plan has no token budget for a feature."""

    def __init__(self, plan: PlanType, feature: Feature):
        super().__init__(f"Feature '{feature.value}' is not available on the '{plan.value}' plan")
        self.plan = plan
        self.feature = feature


PLAN_DEPTH: dict[PlanType, AIDepth] = {
    PlanType.FREE: AIDepth.BASIC,
    PlanType.PRO: AIDepth.MEDIUM,
    PlanType.PREMIUM: AIDepth.HIGH,
}

# Max output tokens per feature and depth; 0 means locked
TOKEN_BUDGETS: dict[Feature, dict[AIDepth, int]] = {
    Feature.RESUME_ANALYZER: {AIDepth.BASIC: 800, AIDepth.MEDIUM: 1500, AIDepth.HIGH: 2500},
    Feature.RESUME_COMPARISON: {AIDepth.BASIC: 600, AIDepth.MEDIUM: 1400, AIDepth.HIGH: 2200},
    Feature.INTERVIEW_QUESTIONS: {AIDepth.BASIC: 0, AIDepth.MEDIUM: 1200, AIDepth.HIGH: 2000},
    Feature.COMPANY_COMPATIBILITY: {AIDepth.BASIC: 0, AIDepth.MEDIUM: 1000, AIDepth.HIGH: 2500},
    Feature.RESUME_EXPORTS: {AIDepth.BASIC: 500, AIDepth.MEDIUM: 800, AIDepth.HIGH: 1200},
    Feature.ATS_RESUME_GENERATOR: {AIDepth.BASIC: 0, AIDepth.MEDIUM: 0, AIDepth.HIGH: 2000},
}

DEFAULT_TEMPERATURE = 0.3


def get_ai_depth(plan: PlanType | str) -> AIDepth:
    return PLAN_DEPTH[PlanType(plan)]


def get_token_budget(plan: PlanType | str, feature: Feature | str) -> int:
    return TOKEN_BUDGETS[Feature(feature)][get_ai_depth(plan)]


def is_feature_available(plan: PlanType | str, feature: Feature | str) -> bool:
    return get_token_budget(plan, feature) > 0


def build_request(
    prompt: str,
    plan: PlanType | str,
    feature: Feature | str,
    *,
    json_mode: bool = True,
    temperature: float = DEFAULT_TEMPERATURE,
) -> GenerationRequest:
    """Build the gateway request for *feature* at *plan*'s depth."""
    plan = PlanType(plan)
    feature = Feature(feature)
    budget = get_token_budget(plan, feature)
    if budget <= 0:
        raise FeatureLockedError(plan, feature)
    return GenerationRequest(prompt=prompt, max_tokens=budget, temperature=temperature, json_mode=json_mode)
