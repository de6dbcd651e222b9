from __future__ import annotations

import logging

import httpx

from contact_wizard.application.ports.bot_mitigation import BotMitigationPort


class RecaptchaTokenProvider(BotMitigationPort):
    """Obtains action-scoped reCAPTCHA tokens from the token broker for a given site key."""

    def __init__(self, site_key: str, token_url: str, timeout: float = 10.0) -> None:
        if not site_key:
            raise ValueError("RECAPTCHA_SITE_KEY is required for the reCAPTCHA provider")
        self._site_key = site_key
        self._token_url = token_url
        self._timeout = timeout
        self._logger = logging.getLogger(__name__)

    async def execute(self, action: str) -> str:
        payload = {"site_key": self._site_key, "action": action}
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            resp = await client.post(self._token_url, json=payload)
        if resp.status_code >= 400:
            self._logger.error(
                "reCAPTCHA token request failed",
                extra={"status": resp.status_code, "reason": resp.text[:200]},
            )
            resp.raise_for_status()

        token = resp.json().get("token")
        if not token:
            raise ValueError("No token returned by the reCAPTCHA broker")
        return str(token)
