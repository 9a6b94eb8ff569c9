"""
Triage enhancement prompts.
"""

from src.config.constants import CompanyStage
from src.services.triage.models import AssessmentSnapshot, DomainScore, IndustryContext

TRIAGE_SYSTEM_PROMPT = (
    "You are an expert business consultant performing domain triage analysis. "
    "Analyze the assessment data and provide enhanced scoring with detailed "
    "reasoning for each domain. Respond with a single JSON object."
)


def build_triage_system_prompt() -> str:
    """Build system prompt for the triage enhancement call."""
    return TRIAGE_SYSTEM_PROMPT


def _format_scores(base_scores: dict[str, DomainScore]) -> str:
    return "\n".join(
        f"{domain}: {score.score:.1f} (confidence: {score.confidence * 100:.0f}%)"
        for domain, score in base_scores.items()
    )


def _join_or_default(items: list[str] | None) -> str:
    return ", ".join(items) if items else "Not specified"


def build_triage_analysis_prompt(
    snapshot: AssessmentSnapshot,
    base_scores: dict[str, DomainScore],
    industry_context: IndustryContext,
) -> str:
    """Build the user prompt asking for refined domain scores.

    Args:
        snapshot: Assessment being triaged
        base_scores: Base scores computed from the questionnaire
        industry_context: Resolved industry context

    Returns:
        Prompt string describing the company and the expected JSON shape.
    """
    stage = snapshot.company_stage
    stage_text = stage.value if isinstance(stage, CompanyStage) else "Unknown"
    context = snapshot.assessment_context
    challenges = context.primary_business_challenges if context else None
    objectives = context.strategic_objectives if context else None

    return f"""Analyze this operational assessment for enhanced domain triage:

Company: {snapshot.company_name}
Industry: {industry_context.sector.value} ({industry_context.regulatory_classification.value})
Stage: {stage_text}

Base Domain Scores:
{_format_scores(base_scores)}

Assessment Context:
- Primary challenges: {_join_or_default(challenges)}
- Strategic objectives: {_join_or_default(objectives)}

Please provide enhanced analysis in JSON format:
{{
  "domainAnalysis": {{
    "domain-name": {{
      "adjustedScore": 4.2,
      "confidence": 0.85,
      "reasoning": "Detailed analysis of why this score was adjusted",
      "criticalFactors": ["Factor 1", "Factor 2"],
      "severity": "high"
    }}
  }}
}}

Only include domains listed above. Scores range from 1.0 (healthy) to 5.0 (critical).
Focus on identifying truly critical operational gaps that require immediate attention.
"""
