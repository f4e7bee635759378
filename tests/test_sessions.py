"""Tests for the per-user session registry (fake clock, in-memory storage)."""

import pytest

from vendor_bot.services.sessions import SessionRegistry
from vendor_bot.wizard import MemoryFormStorage, RegistrationClient, WizardSession


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _registry(clock, idle_seconds=60, max_sessions=10):
    created = []

    async def factory(user_id: int) -> WizardSession:
        created.append(user_id)
        return WizardSession(MemoryFormStorage(user_id), RegistrationClient("http://registration.test"))

    registry = SessionRegistry(factory, idle_seconds=idle_seconds, max_sessions=max_sessions, clock=clock)
    return registry, created


@pytest.mark.asyncio
async def test_same_user_gets_same_session():
    registry, created = _registry(FakeClock())
    first = await registry.get(1)
    assert await registry.get(1) is first
    assert created == [1]


@pytest.mark.asyncio
async def test_idle_sessions_are_evicted():
    clock = FakeClock()
    registry, created = _registry(clock, idle_seconds=60)
    stale = await registry.get(1)

    clock.now += 30
    await registry.get(2)
    clock.now += 45                                  # user 1 idle 75s, user 2 idle 45s

    assert registry.evict_idle() == 1
    assert 1 not in registry
    assert 2 in registry

    assert await registry.get(1) is not stale
    assert created == [1, 2, 1]


@pytest.mark.asyncio
async def test_use_refreshes_idle_timer():
    clock = FakeClock()
    registry, _ = _registry(clock, idle_seconds=60)
    session = await registry.get(1)

    for _ in range(5):
        clock.now += 50
        assert await registry.get(1) is session


@pytest.mark.asyncio
async def test_capacity_drops_least_recently_used():
    registry, _ = _registry(FakeClock(), max_sessions=2)
    await registry.get(1)
    await registry.get(2)
    await registry.get(1)
    await registry.get(3)

    assert len(registry) == 2
    assert 2 not in registry
    assert 1 in registry and 3 in registry


@pytest.mark.asyncio
async def test_drop_forgets_session():
    registry, created = _registry(FakeClock())
    await registry.get(1)
    registry.drop(1)
    registry.drop(42)                                # unknown user is fine

    assert len(registry) == 0
    await registry.get(1)
    assert created == [1, 1]
