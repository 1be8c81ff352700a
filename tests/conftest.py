# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides settings without .env, sample submissions, repositories, a
controllable clock and a mock text analysis client. No network I/O.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock

import pytest

from reqintake.cache.cache_factory import reset_shared_cache
from reqintake.cache.memory_store import MemoryVerdictCache
from reqintake.config.settings import Settings
from reqintake.core.models import Submission
from reqintake.llm.models import LLMResponse
from reqintake.logging.context import clear_context
from reqintake.storage.memory_repository import InMemorySubmissionRepository

ROAD_REPAIR_BODY = (
    "The Transportation department requests an allocation of funds for the "
    "repair of arterial roads damaged during the winter season. Several main "
    "corridors in the northern district show deep potholes, cracked asphalt "
    "and failing drainage that endanger drivers, cyclists and pedestrians. "
    "The proposed budget covers resurfacing of forty kilometres of road, "
    "replacement of damaged kerbs, repainting of lane markings and the "
    "installation of improved storm drains at flood prone junctions. Work "
    "would be scheduled at night to limit disruption to commuters and public "
    "transport services. Contractors will be selected through an open tender "
    "process with quality and safety criteria. The department estimates that "
    "timely repairs will reduce vehicle damage claims, lower long term "
    "maintenance costs and improve travel times across the network. A "
    "quarterly progress report will be shared with the executive office, "
    "including spending against plan, completed road segments and citizen "
    "feedback collected through the service portal. Without this funding the "
    "deterioration is expected to accelerate, leading to emergency closures "
    "and significantly higher reconstruction costs in the following fiscal "
    "year. The request therefore asks for approval of the repair programme "
    "before the start of the spring construction season."
)


# Same request reworded in two places (one keyword, one stop word).
ROAD_REPAIR_VARIANT_BODY = ROAD_REPAIR_BODY.replace("forty", "fifty").replace(
    "Contractors will be", "Contractors shall be"
)

# === FIXTURES: Settings / clock ===


@pytest.fixture(autouse=True)
def _isolate_process_state():
    """Reset the shared verdict cache and logging context around each test."""
    reset_shared_cache()
    clear_context()
    yield
    reset_shared_cache()
    clear_context()


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any local .env, with no backoff delay."""
    return Settings(_env_file=None, similarity_check_retry_delay=0.0)


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def verdict_cache(clock: FakeClock) -> MemoryVerdictCache:
    return MemoryVerdictCache(ttl=3600.0, max_keys=1000, clock=clock)


# === FIXTURES: Sample data ===


@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def road_repair_body() -> str:
    return ROAD_REPAIR_BODY


@pytest.fixture
def road_repair_variant_body() -> str:
    return ROAD_REPAIR_VARIANT_BODY


@pytest.fixture
def road_repair_submission(now: datetime) -> Submission:
    """Existing Transportation request the Road Repair scenario duplicates."""
    return Submission(
        id="REQ-ROAD01",
        title="Budget Request for Road Repairs 2024",
        body=ROAD_REPAIR_BODY,
        category="Transportation",
        created_at=now - timedelta(days=12),
        status="processed",
        type="Budget Request",
    )


@pytest.fixture
def unrelated_submission(now: datetime) -> Submission:
    return Submission(
        id="REQ-PARK01",
        title="New playground equipment for Al Bateen park",
        body=(
            "Residents ask for modern playground equipment, shaded seating and "
            "drinking fountains in the neighbourhood park."
        ),
        category="Transportation",
        created_at=now - timedelta(days=3),
        status="pending",
    )


@pytest.fixture
def repository(road_repair_submission, unrelated_submission) -> InMemorySubmissionRepository:
    return InMemorySubmissionRepository([road_repair_submission, unrelated_submission])


# === FIXTURES: Mock LLM ===


ANALYSIS_REPLY = """1. Summary: The request seeks funding for road repairs.
2. Key trends:
- Rising maintenance backlog
- Increased winter damage
3. Impact assessment: Safer roads and fewer damage claims.
4. Policy alignment: Consistent with the mobility strategy.
"""

RECOMMENDATION_REPLY = """### Strategic recommendations
1. Approve a multi-year resurfacing plan
2. Tie funding to condition surveys
### Operational recommendations
- Schedule works at night
### Implementation timeline
Six months starting in spring.
### Potential risks
- Contractor delays
- Cost overruns
"""


@pytest.fixture
def mock_llm_client() -> AsyncMock:
    """Mock BaseLLMClient returning an analysis then recommendations."""
    client = AsyncMock()
    client.complete = AsyncMock(side_effect=[
        LLMResponse(content=ANALYSIS_REPLY, model="gpt-4", provider="mock"),
        LLMResponse(content=RECOMMENDATION_REPLY, model="gpt-4", provider="mock"),
    ])
    client.provider_name = "mock"
    client.model = "gpt-4"
    return client
