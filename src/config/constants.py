"""
Constants, enums, and static values.
"""

from enum import Enum


class Domain(str, Enum):
    """Business domains assessed by the questionnaire.

    Declaration order is the canonical ordering used to break score ties.
    """

    STRATEGIC_ALIGNMENT = "strategic-alignment"
    FINANCIAL_MANAGEMENT = "financial-management"
    REVENUE_ENGINE = "revenue-engine"
    OPERATIONAL_EXCELLENCE = "operational-excellence"
    PEOPLE_ORGANIZATION = "people-organization"
    TECHNOLOGY_DATA = "technology-data"
    CUSTOMER_EXPERIENCE = "customer-experience"
    SUPPLY_CHAIN = "supply-chain"
    RISK_COMPLIANCE = "risk-compliance"
    PARTNERSHIPS = "partnerships"
    CUSTOMER_SUCCESS = "customer-success"
    CHANGE_MANAGEMENT = "change-management"

    @classmethod
    def values(cls) -> list[str]:
        return [d.value for d in cls]


DOMAIN_ORDER: dict[str, int] = {d.value: i for i, d in enumerate(Domain)}


class Sector(str, Enum):
    """Industry sectors with a dedicated rule record."""

    FINANCIAL_SERVICES = "financial-services"
    HEALTHCARE = "healthcare"
    TECHNOLOGY = "technology"
    MANUFACTURING = "manufacturing"
    RETAIL = "retail"
    PROFESSIONAL_SERVICES = "professional-services"
    UNKNOWN = "unknown"

    @classmethod
    def from_value(cls, value: "str | Sector | None") -> "Sector":
        """Map any input to a sector; unrecognised values map to UNKNOWN."""
        if isinstance(value, Sector):
            return value
        if not value:
            return cls.UNKNOWN
        normalized = str(value).strip().lower()
        for sector in cls:
            if sector.value == normalized:
                return sector
        return cls.UNKNOWN


class RegulatoryTier(str, Enum):
    """Regulatory classification of a sector."""

    LIGHTLY = "lightly-regulated"
    MODERATELY = "moderately-regulated"
    HEAVILY = "heavily-regulated"


class CompanyStage(str, Enum):
    """Company maturity stage."""

    STARTUP = "startup"
    GROWTH = "growth"
    MATURE = "mature"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class PriorityLevel(str, Enum):
    HEALTHY = "HEALTHY"
    MODERATE = "MODERATE"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class AgentActivation(str, Enum):
    NOT_REQUIRED = "NOT_REQUIRED"
    CONDITIONAL = "CONDITIONAL"
    REQUIRED = "REQUIRED"


class HealthStatus(str, Enum):
    """Operational health of the triage engine."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    CRITICAL = "critical"


class Trend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DEGRADING = "degrading"


class TriageStage(str, Enum):
    """Triage pipeline stages."""

    VALIDATION = "validation"
    INDUSTRY_CONTEXT = "industry_context"
    BASE_SCORES = "base_scores"
    ENHANCEMENT = "enhancement"
    CROSS_DOMAIN = "cross_domain"
    SELECTION = "selection"
    CONFIDENCE = "confidence"


class TriageStageDescription(str, Enum):
    """Triage pipeline stage descriptions."""

    VALIDATION = "Validate assessment data completeness"
    INDUSTRY_CONTEXT = "Build the industry context for the assessment"
    BASE_SCORES = "Aggregate questionnaire responses into base domain scores"
    ENHANCEMENT = "Refine base scores with the external completion service"
    CROSS_DOMAIN = "Apply cross-domain impacts and industry weighting"
    SELECTION = "Select the critical domains for deep analysis"
    CONFIDENCE = "Compute the overall triage confidence"


# Selection bounds
MIN_CRITICAL_DOMAINS = 3
MAX_CRITICAL_DOMAINS = 5

# Score and confidence ranges
MIN_SCORE = 1.0
MAX_SCORE = 5.0
MIN_CONFIDENCE = 0.1
MAX_CONFIDENCE = 1.0

# Cross-domain impacts
HIGH_SCORE_THRESHOLD = 4.0
CROSS_DOMAIN_BOOST_FACTOR = 0.2

# Baseline response quality until pattern-based scoring exists
BASELINE_QUALITY_SCORE = 0.8

# Confidence assigned to a result after a manual override
OVERRIDE_MIN_CONFIDENCE = 0.8
