"""
Durable storage for in-progress vendor applications.

Two string keys per owner:
  - {prefix}:{owner}:form_data        JSON object of the TEXT fields
  - {prefix}:{owner}:completed_steps  JSON array of step numbers

Storage is best-effort: read, write and decode failures are logged and
swallowed, and a failed load behaves like an empty store.
"""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Protocol

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from vendor_bot.wizard.fields import PERSISTED_FIELDS

logger = logging.getLogger(__name__)

KEY_PREFIX = "vendor_onboarding"


class FormStorage(Protocol):
    async def load(self) -> tuple[dict[str, str], list[int]]: ...

    async def save(self, values: Mapping[str, str], completed_steps: Iterable[int]) -> None: ...

    async def clear(self) -> None: ...


def dump_form(values: Mapping[str, Any]) -> str:
    """Serialize only the persistable text fields."""
    return json.dumps(
        {name: values[name] for name in PERSISTED_FIELDS if isinstance(values.get(name), str)}
    )


def parse_form(raw: str | None) -> dict[str, str]:
    if not raw:
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("form data is not a JSON object")
    return {k: v for k, v in data.items() if k in PERSISTED_FIELDS and isinstance(v, str)}


def dump_steps(completed_steps: Iterable[int]) -> str:
    return json.dumps(sorted(set(completed_steps)))


def parse_steps(raw: str | None) -> list[int]:
    if not raw:
        return []
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("completed steps is not a JSON array")
    return [s for s in data if isinstance(s, int) and not isinstance(s, bool)]


class _KeyValueFormStorage(ABC):
    """Shared load/save/clear logic over a raw string key-value backend."""

    errors: tuple[type[Exception], ...] = (ValueError, TypeError)

    def __init__(self, owner_id: str | int, prefix: str = KEY_PREFIX):
        self.owner_id = str(owner_id)
        self.form_key = f"{prefix}:{owner_id}:form_data"
        self.steps_key = f"{prefix}:{owner_id}:completed_steps"

    @abstractmethod
    async def _get(self, key: str) -> str | None: ...

    @abstractmethod
    async def _set(self, key: str, value: str) -> None: ...

    @abstractmethod
    async def _delete(self, *keys: str) -> None: ...

    async def load(self) -> tuple[dict[str, str], list[int]]:
        try:
            values = parse_form(await self._get(self.form_key))
            steps = parse_steps(await self._get(self.steps_key))
        except self.errors as e:
            logger.warning("Could not restore saved form: owner=%s, error=%s", self.owner_id, e)
            return {}, []
        return values, steps

    async def save(self, values: Mapping[str, str], completed_steps: Iterable[int]) -> None:
        try:
            await self._set(self.form_key, dump_form(values))
            await self._set(self.steps_key, dump_steps(completed_steps))
        except self.errors as e:
            logger.warning("Could not save form progress: owner=%s, error=%s", self.owner_id, e)

    async def clear(self) -> None:
        try:
            await self._delete(self.form_key, self.steps_key)
        except self.errors as e:
            logger.warning("Could not erase saved form: owner=%s, error=%s", self.owner_id, e)


class RedisFormStorage(_KeyValueFormStorage):
    """Form progress kept in Redis, one pair of keys per Telegram user."""

    errors = (RedisError, ValueError, TypeError)

    def __init__(
        self,
        redis: aioredis.Redis,
        owner_id: str | int,
        prefix: str = KEY_PREFIX,
        ttl_seconds: int | None = None,
    ):
        super().__init__(owner_id, prefix)
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    async def _get(self, key: str) -> str | None:
        value = await self.redis.get(key)
        if isinstance(value, bytes):
            value = value.decode()
        return value

    async def _set(self, key: str, value: str) -> None:
        await self.redis.set(key, value, ex=self.ttl_seconds)

    async def _delete(self, *keys: str) -> None:
        await self.redis.delete(*keys)


class MemoryFormStorage(_KeyValueFormStorage):
    """In-process storage with the same serialization, for tests and local runs."""

    def __init__(self, owner_id: str | int = "local", prefix: str = KEY_PREFIX, data: dict | None = None):
        super().__init__(owner_id, prefix)
        self.data: dict[str, str] = data if data is not None else {}

    async def _get(self, key: str) -> str | None:
        return self.data.get(key)

    async def _set(self, key: str, value: str) -> None:
        self.data[key] = value

    async def _delete(self, *keys: str) -> None:
        for key in keys:
            self.data.pop(key, None)


_redis: aioredis.Redis | None = None


async def get_redis(url: str) -> aioredis.Redis:
    """Singleton Redis connection."""
    global _redis
    if _redis is None:
        _redis = aioredis.from_url(url, decode_responses=True)
    return _redis
