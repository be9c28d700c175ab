"""
Pytest configuration and fixtures
"""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings, get_settings
from app.services.quiz_submission.quiz_submission import QuizSubmission
from app.services.quiz_submission.quiz_submission_route import get_telegram_client
from app.utils.telegram_client import TelegramClient
from main import app

BOT_TOKEN = "123456:test-token"
CHAT_ID = "-100200300"
API_BASE = "https://telegram.test"


class TelegramStub:
    """Stands in for the Bot API behind an httpx.MockTransport"""

    def __init__(self):
        self.requests = []
        self.status_code = 200
        self.reply = {"ok": True, "result": {"message_id": 1}}
        self.raw_body = None
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if self.raw_body is not None:
            return httpx.Response(self.status_code, content=self.raw_body)
        return httpx.Response(self.status_code, json=self.reply)

    def fail(self, error_code, description=None):
        self.status_code = error_code
        self.reply = {"ok": False, "error_code": error_code}
        if description is not None:
            self.reply["description"] = description

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def last_payload(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        telegram_bot_token=BOT_TOKEN,
        telegram_chat_id=CHAT_ID,
        telegram_api_base=API_BASE,
        telegram_parse_mode="HTML",
        relay_title="New Past Continuous Test Result",
        relay_detail_style="grouped",
        relay_max_detail_lines=10,
        telegram_max_message_length=4096,
    )


@pytest.fixture
def telegram_stub() -> TelegramStub:
    return TelegramStub()


@pytest.fixture
def telegram_client(settings, telegram_stub) -> TelegramClient:
    return TelegramClient.from_settings(settings, transport=telegram_stub.transport())


@pytest.fixture
def quiz_submission(settings, telegram_client) -> QuizSubmission:
    return QuizSubmission(settings=settings, telegram_client=telegram_client)


@pytest.fixture
def client(settings, telegram_client):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_telegram_client] = lambda: telegram_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def submission_payload():
    return {
        "studentName": "Ana",
        "answers": [
            {
                "questionLabel": "Q1",
                "userAnswer": "was eating",
                "correct": True,
                "correctAnswers": "was eating",
            }
        ],
        "score": 1,
        "total": 1,
    }
