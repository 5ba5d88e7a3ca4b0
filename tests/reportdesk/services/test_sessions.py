import asyncio

import pytest

from reportdesk.services import ReportOrchestrator, SessionRegistry


@pytest.fixture
def registry(backend, sink, clock) -> SessionRegistry:
    return SessionRegistry(lambda: ReportOrchestrator(backend, sink), idle_seconds=60.0, clock=clock)


def test_get_reuses_session_for_same_user(registry):
    first = registry.get("42")

    assert registry.get("42") is first
    assert len(registry) == 1


def test_idle_session_is_discarded_on_next_access(registry, clock):
    stale = registry.get("42")
    clock.advance(60.0)

    registry.get("7")

    assert len(registry) == 1
    assert registry.get("42") is not stale


def test_recently_used_session_survives(registry, clock):
    session = registry.get("42")
    clock.advance(45.0)
    registry.get("42")
    clock.advance(45.0)

    registry.get("7")

    assert registry.get("42") is session
    assert len(registry) == 2


@pytest.mark.asyncio
async def test_session_with_generate_in_flight_is_kept(registry, backend, clock, predictions_request):
    gate = asyncio.Event()
    backend.generate_gate = gate
    session = registry.get("42")
    task = asyncio.create_task(session.orchestrator.generate(predictions_request))
    while "generate" not in backend.call_names():
        await asyncio.sleep(0)
    clock.advance(120.0)

    registry.get("7")

    assert registry.get("42") is session
    gate.set()
    await task
    await session.orchestrator.wait_for_insights()


def test_discard_closes_session(registry):
    registry.get("42")

    assert registry.discard("42") is True
    assert registry.discard("42") is False
    assert len(registry) == 0


def test_idle_seconds_must_be_positive(backend, sink):
    with pytest.raises(ValueError, match="idle_seconds"):
        SessionRegistry(lambda: ReportOrchestrator(backend, sink), idle_seconds=0)
