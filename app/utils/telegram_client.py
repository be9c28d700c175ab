# app/utils/telegram_client.py
from typing import Any, Dict, Optional

import httpx

from app.core.config import Settings
from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)


class TelegramClient:
    def __init__(
        self,
        api_base: str = "https://api.telegram.org",
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "TelegramClient":
        return cls(
            api_base=settings.telegram_api_base,
            timeout=settings.telegram_timeout_seconds,
            transport=transport,
        )

    def _method_url(self, bot_token: str, method: str) -> str:
        """Bot API URL; the token is part of the path"""
        return f"{self.api_base}/bot{bot_token}/{method}"

    async def send_message(
        self,
        bot_token: str,
        chat_id: str,
        text: str,
        parse_mode: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Send one message and return the decoded Bot API reply.

        Error statuses are not raised: the Bot API describes failures in the
        body (``ok``, ``error_code``, ``description``). A reply that is not
        JSON raises ``ValueError``; transport faults raise ``httpx.HTTPError``.
        """
        url = self._method_url(bot_token, "sendMessage")
        payload: Dict[str, Any] = {"chat_id": chat_id, "text": text}
        if parse_mode:
            payload["parse_mode"] = parse_mode

        logger.info("Sending to Telegram: %s", url)
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(url, json=payload)

        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected Telegram response: {data!r}")
        logger.info("Telegram API response: status=%s ok=%s", response.status_code, data.get("ok"))
        return data
