"""In-memory registry of live dream sessions, one per browser tab.

Nothing is persisted: a session lives from page load until the tab sends its
teardown request (or the process exits).
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, List

from dream_oracle.domain.errors import SessionNotFoundError
from dream_oracle.services.session.controller import DreamSessionController

logger = logging.getLogger(__name__)

ControllerFactory = Callable[[], DreamSessionController]


class SessionRegistry:
    def __init__(self, factory: ControllerFactory, max_sessions: int = 1000) -> None:
        self._factory = factory
        self._sessions: Dict[str, DreamSessionController] = {}
        self._max_sessions = max_sessions

    async def create(self) -> DreamSessionController:
        if len(self._sessions) >= self._max_sessions:
            # oldest first: dicts keep insertion order
            oldest = next(iter(self._sessions))
            logger.warning(f"Session limit reached, evicting {oldest}")
            await self.discard(oldest)
        controller = self._factory()
        self._sessions[controller.session_id] = controller
        logger.info(f"Session {controller.session_id} created ({len(self._sessions)} live)")
        return controller

    def get(self, session_id: str) -> DreamSessionController:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    async def discard(self, session_id: str) -> bool:
        controller = self._sessions.pop(session_id, None)
        if controller is None:
            return False
        await controller.teardown()
        logger.info(f"Session {session_id} discarded ({len(self._sessions)} live)")
        return True

    async def close_all(self) -> None:
        for session_id in list(self._sessions):
            await self.discard(session_id)

    def session_ids(self) -> List[str]:
        return list(self._sessions)

    def __len__(self) -> int:
        return len(self._sessions)
