"""
In-process registry of wizard sessions, one per Telegram user.

A session holds passwords and document bytes in memory, so entries are
dropped once submitted or reset, after SESSION_IDLE_SECONDS without use,
and oldest-first beyond MAX_SESSIONS. Text fields and completed steps stay
in Redis and are restored by the factory on the next contact.
"""

import logging
import time
from collections import OrderedDict
from typing import Awaitable, Callable

from vendor_bot.wizard import WizardSession

logger = logging.getLogger(__name__)

SessionFactory = Callable[[int], Awaitable[WizardSession]]


class SessionRegistry:
    def __init__(
        self,
        factory: SessionFactory,
        idle_seconds: float,
        max_sessions: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._factory = factory
        self.idle_seconds = idle_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        # Least recently used first.
        self._sessions: OrderedDict[int, tuple[WizardSession, float]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._sessions

    async def get(self, user_id: int) -> WizardSession:
        """Return the user's session, creating it through the factory if needed."""
        self.evict_idle()

        entry = self._sessions.pop(user_id, None)
        session = entry[0] if entry else await self._factory(user_id)
        self._sessions[user_id] = (session, self._clock())

        while len(self._sessions) > self.max_sessions:
            evicted, _ = self._sessions.popitem(last=False)
            logger.info("Wizard session evicted (capacity): user=%s", evicted)
        return session

    def drop(self, user_id: int) -> None:
        self._sessions.pop(user_id, None)

    def evict_idle(self) -> int:
        """Remove sessions unused for idle_seconds. Returns how many were removed."""
        cutoff = self._clock() - self.idle_seconds
        evicted = 0
        while self._sessions:
            user_id, (_, last_used) = next(iter(self._sessions.items()))
            if last_used > cutoff:
                break
            del self._sessions[user_id]
            evicted += 1
        if evicted:
            logger.info("Wizard sessions evicted (idle): count=%s", evicted)
        return evicted
