"""Speech synthesis executed by the browser (window.speechSynthesis).

Commands are pushed to the page over the session's event stream; the page
reports start/end/error back through the speech-signal route.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Hashable

from dream_oracle.domain.ports.speech import SpeechEngine
from dream_oracle.domain.session.entities import Utterance
from dream_oracle.infrastructure.sse.hub import EventStreamHub

logger = logging.getLogger(__name__)


class BrowserSpeechEngine(SpeechEngine):
    def __init__(self, hub: EventStreamHub, stream_id: Hashable) -> None:
        self._hub = hub
        self._stream_id = stream_id

    async def _send(self, command: str, **extra: Any) -> None:
        body: Dict[str, Any] = {"type": f"speech.{command}", **extra}
        await self._hub.publish(stream_id=self._stream_id, chunk=json.dumps(body, ensure_ascii=False))

    async def speak(self, utterance: Utterance) -> None:
        logger.debug(f"Sending utterance {utterance.id} ({len(utterance.text)} chars)")
        await self._send("speak", utterance=utterance.to_dict())

    async def pause(self) -> None:
        await self._send("pause")

    async def resume(self) -> None:
        await self._send("resume")

    async def cancel(self) -> None:
        await self._send("cancel")
