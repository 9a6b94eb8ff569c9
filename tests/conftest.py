"""Pytest configuration and fixtures."""

import pytest

from src.config.settings import Settings
from src.config.triage import TriageConfiguration
from src.services.triage.metrics import CircuitBreaker, TriageMetricsCollector
from tests.factories import FakeClock, make_domain, make_snapshot


@pytest.fixture
def settings():
    """Provide settings fixture with a dummy provider key."""
    return Settings(openai_api_key="test-key", anthropic_api_key=None, _env_file=None)


@pytest.fixture
def config(settings):
    return TriageConfiguration.from_settings(settings)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def metrics(config, clock):
    return TriageMetricsCollector(
        budget=config.performance,
        breaker=CircuitBreaker(
            threshold=config.circuit_breaker_threshold,
            reset_seconds=config.circuit_breaker_reset_seconds,
            clock=clock,
        ),
    )


@pytest.fixture
def tech_snapshot():
    """Technology company with every domain fully answered."""
    return make_snapshot(
        {
            "technology-data": make_domain(5, 4, 5),
            "revenue-engine": make_domain(4, 4),
            "people-organization": make_domain(3, 4),
            "strategic-alignment": make_domain(2, 2),
            "operational-excellence": make_domain(3, 3),
        },
        sector="technology",
    )


@pytest.fixture
def enhancement_payload():
    return {
        "domainAnalysis": {
            "strategic-alignment": {
                "adjustedScore": 4.6,
                "confidence": 0.9,
                "reasoning": "Leadership misaligned on growth plan",
                "criticalFactors": ["No shared OKRs"],
                "severity": "critical",
            },
            "unknown-domain": {"adjustedScore": 5.0},
        }
    }
