"""Tests for the external enhancement adapter."""

import asyncio
from dataclasses import replace

import pytest

from src.config.constants import PriorityLevel, Severity
from src.config.triage import PerformanceBudget
from src.services.triage.enhancer import EnhancementAdapter, merge_enhanced_scores
from src.services.triage.errors import TriageConfigurationError
from src.services.triage.industry import default_industry_context
from src.services.triage.models import DomainAnalysis, EnhancementFailure, EnhancementSuccess
from tests.factories import FakeCompletionClient, make_domain, make_scores, make_snapshot


@pytest.fixture
def snapshot():
    return make_snapshot(
        {"strategic-alignment": make_domain(3, 3), "revenue-engine": make_domain(2, 3)}
    )


@pytest.fixture
def base_scores():
    return make_scores({"strategic-alignment": 3.0, "revenue-engine": 2.5})


def _adapter(config, metrics, client):
    return EnhancementAdapter(config, metrics, client_factory=lambda model: client)


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


class TestMerge:
    def test_only_supplied_fields_overwrite(self, base_scores):
        merged, enhanced = merge_enhanced_scores(
            base_scores, {"revenue-engine": DomainAnalysis(confidence=0.95)}
        )
        assert enhanced == ["revenue-engine"]
        assert merged["revenue-engine"].confidence == 0.95
        assert merged["revenue-engine"].score == 2.5
        assert merged["revenue-engine"].reasoning == "base"
        assert merged["strategic-alignment"] is base_scores["strategic-alignment"]

    def test_out_of_range_values_are_clamped(self, base_scores):
        merged, _ = merge_enhanced_scores(
            base_scores,
            {"strategic-alignment": DomainAnalysis(adjusted_score=7.5, confidence=1.4)},
        )
        assert merged["strategic-alignment"].score == 5.0
        assert merged["strategic-alignment"].confidence == 1.0
        assert merged["strategic-alignment"].priority_level is PriorityLevel.CRITICAL

    def test_unknown_domains_ignored(self, base_scores):
        merged, enhanced = merge_enhanced_scores(
            base_scores, {"supply-chain": DomainAnalysis(adjusted_score=4.0)}
        )
        assert enhanced == []
        assert set(merged) == set(base_scores)


# ---------------------------------------------------------------------------
# Calls
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_successful_enhancement(config, metrics, snapshot, base_scores, enhancement_payload):
    client = FakeCompletionClient(payload=enhancement_payload)
    metrics.record_enhancement_failure()
    adapter = _adapter(config, metrics, client)

    result = await adapter.enhance(snapshot, base_scores, default_industry_context())

    assert isinstance(result, EnhancementSuccess)
    assert result.enhanced_domains == ["strategic-alignment"]
    refined = result.scores["strategic-alignment"]
    assert refined.score == 4.6
    assert refined.severity is Severity.CRITICAL
    assert refined.critical_factors == ["No shared OKRs"]
    assert result.token_usage.total == 1200
    assert metrics.breaker.failures == 0

    call = client.calls[0]
    assert call["temperature"] == 0.1
    assert call["max_tokens"] == 3000
    assert "strategic-alignment: 3.0 (confidence: 80%)" in call["user_prompt"]
    assert "Primary challenges: Cash flow visibility" in call["user_prompt"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        "I could not analyze this assessment.",
        {"analysis": {}},
        {"domainAnalysis": {"strategic-alignment": {"severity": "catastrophic"}}},
        {"domainAnalysis": ["strategic-alignment"]},
        '{"domainAnalysis": {"strategic-alignment": {"adjustedScore": NaN, "confidence": NaN}}}',
        '{"domainAnalysis": {"revenue-engine": {"adjustedScore": Infinity}}}',
    ],
)
async def test_malformed_payload_falls_back(config, metrics, snapshot, base_scores, payload):
    adapter = _adapter(config, metrics, FakeCompletionClient(payload=payload))

    result = await adapter.enhance(snapshot, base_scores, default_industry_context())

    assert isinstance(result, EnhancementFailure)
    assert result.scores is base_scores
    assert metrics.breaker.failures == 1


@pytest.mark.asyncio
async def test_network_error_falls_back(config, metrics, snapshot, base_scores):
    adapter = _adapter(config, metrics, FakeCompletionClient(error=ConnectionError("reset by peer")))

    result = await adapter.enhance(snapshot, base_scores, default_industry_context())

    assert isinstance(result, EnhancementFailure)
    assert result.reason == "ConnectionError: reset by peer"
    assert result.attempted
    assert metrics.breaker.failures == 1


@pytest.mark.asyncio
async def test_timeout_is_a_failure(config, metrics, snapshot, base_scores):
    class SlowClient(FakeCompletionClient):
        async def complete_json(self, *args, **kwargs):
            await asyncio.sleep(1)
            return await super().complete_json(*args, **kwargs)

    fast_config = replace(config, performance=PerformanceBudget(max_processing_time=10))
    adapter = _adapter(fast_config, metrics, SlowClient(payload={"domainAnalysis": {}}))

    result = await adapter.enhance(snapshot, base_scores, default_industry_context())

    assert isinstance(result, EnhancementFailure)
    assert result.reason == "enhancement timed out"
    assert metrics.breaker.failures == 1


@pytest.mark.asyncio
async def test_open_breaker_skips_call(config, metrics, snapshot, base_scores):
    client = FakeCompletionClient(payload={"domainAnalysis": {}})
    for _ in range(config.circuit_breaker_threshold):
        metrics.record_enhancement_failure()
    adapter = _adapter(config, metrics, client)

    result = await adapter.enhance(snapshot, base_scores, default_industry_context())

    assert isinstance(result, EnhancementFailure)
    assert result.reason == "circuit breaker open"
    assert not result.attempted
    assert client.calls == []
    assert metrics.breaker.failures == config.circuit_breaker_threshold


@pytest.mark.asyncio
async def test_disabled_adapter_never_calls(config, metrics, snapshot, base_scores):
    adapter = EnhancementAdapter(config, metrics, client_factory=None)

    result = await adapter.enhance(snapshot, base_scores, default_industry_context())

    assert isinstance(result, EnhancementFailure)
    assert result.reason == "enhancement disabled"
    assert metrics.breaker.failures == 0


@pytest.mark.asyncio
async def test_non_finite_values_never_reach_scores(config, metrics, snapshot, base_scores):
    payload = '{"domainAnalysis": {"revenue-engine": {"adjustedScore": NaN, "confidence": 0.9}}}'
    adapter = _adapter(config, metrics, FakeCompletionClient(payload=payload))

    result = await adapter.enhance(snapshot, base_scores, default_industry_context())

    assert isinstance(result, EnhancementFailure)
    assert result.scores["revenue-engine"].score == 2.5
    assert metrics.breaker.failures == 1


def test_missing_client_factory_is_a_configuration_error(config, metrics):
    adapter = EnhancementAdapter(config, metrics, client_factory=None)
    with pytest.raises(TriageConfigurationError):
        adapter._get_client()
