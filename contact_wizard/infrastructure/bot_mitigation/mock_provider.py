from __future__ import annotations

import logging
from uuid import uuid4

from contact_wizard.application.ports.bot_mitigation import BotMitigationPort


class MockBotMitigation(BotMitigationPort):
    def __init__(self, site_key: str) -> None:
        self._site_key = site_key
        self._logger = logging.getLogger(__name__)

    async def execute(self, action: str) -> str:
        token = f"mock-{action}-{uuid4().hex}"
        self._logger.info("Mock bot-mitigation token issued", extra={"event": action})
        return token
