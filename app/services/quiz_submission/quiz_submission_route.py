from fastapi import APIRouter, Depends, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.config import Settings, get_settings
from app.core.logging_config import LoggingConfig
from app.utils.telegram_client import TelegramClient

from .quiz_submission import QuizSubmission
from .quiz_submission_errors import MethodNotAllowedError, RelayError
from .quiz_submission_schema import RelayResult

logger = LoggingConfig.get_logger(__name__)
router = APIRouter()

SUBMIT_PATH = "/api/submit"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Credentials": "true",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def get_telegram_client(settings: Settings = Depends(get_settings)) -> TelegramClient:
    return TelegramClient.from_settings(settings)


def get_quiz_submission(
    settings: Settings = Depends(get_settings),
    telegram_client: TelegramClient = Depends(get_telegram_client),
) -> QuizSubmission:
    return QuizSubmission(settings=settings, telegram_client=telegram_client)


def relay_response(status_code: int, result: RelayResult) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(exclude_none=True),
        headers=CORS_HEADERS,
    )


@router.api_route(
    SUBMIT_PATH,
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    response_model=RelayResult,
    tags=["Submission"],
)
async def submit_results(request: Request, quiz_submission: QuizSubmission = Depends(get_quiz_submission)):
    """Relay a graded quiz submission to the configured Telegram chat"""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    try:
        if request.method != "POST":
            raise MethodNotAllowedError()
        payload = await request.json()
        result = await quiz_submission.submit(payload)
        return relay_response(200, result)

    except RelayError as e:
        return relay_response(e.status_code, RelayResult(success=False, error=e.message))
    except Exception as e:
        logger.exception("Server error while relaying submission")
        return relay_response(500, RelayResult(success=False, error=f"Internal server error: {e}"))


async def method_not_allowed_handler(request: Request, exc: StarletteHTTPException):
    """Methods the router does not list still get the relay's 405 body and CORS headers"""
    if exc.status_code == 405 and request.url.path == SUBMIT_PATH:
        return relay_response(405, RelayResult(success=False, error=MethodNotAllowedError().message))
    return await http_exception_handler(request, exc)
