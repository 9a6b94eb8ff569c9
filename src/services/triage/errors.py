"""Triage error types."""


class TriageError(Exception):
    """Base class for triage errors."""


class TriageValidationError(TriageError):
    """Assessment data is not fit for triage. Raised before any completion call."""

    def __init__(self, errors: list[str], data_completeness: float = 0.0):
        self.errors = errors
        self.data_completeness = data_completeness
        super().__init__(f"Assessment validation failed: {', '.join(errors)}")


class EnhancementError(TriageError):
    """Completion service call failed. Never escapes the enhancement adapter."""


class TriageConfigurationError(TriageError):
    """Required configuration or credentials are missing."""


class TriageAnalysisError(TriageError):
    """Unexpected failure while scoring an assessment."""

    def __init__(self, assessment_id: str, message: str):
        self.assessment_id = assessment_id
        super().__init__(f"Triage analysis failed for assessment {assessment_id}: {message}")


class OverrideValidationError(TriageError):
    """Override request rejected."""


class TriageResultNotFoundError(TriageError):
    """No stored triage result for the assessment."""

    def __init__(self, assessment_id: str):
        self.assessment_id = assessment_id
        super().__init__(f"No existing triage results found for assessment {assessment_id}")
