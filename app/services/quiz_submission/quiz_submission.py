import html
import math
from typing import Any, Dict, List, Optional, Tuple

from app.core.config import Settings, get_settings
from app.core.logging_config import LoggingConfig
from app.utils.telegram_client import TelegramClient

from .quiz_submission_errors import ClientInputError, ConfigurationError, DeliveryError
from .quiz_submission_schema import AnswerRecord, RelayResult, Submission, TelegramResult

logger = LoggingConfig.get_logger(__name__)

PASS_GLYPH = "✅"
FAIL_GLYPH = "❌"
MISSING_FIELDS_MESSAGE = "Missing required fields: studentName, answers, score, or total"
SUCCESS_MESSAGE = "Results sent successfully to Telegram"

DELIVERY_ERRORS = {
    400: "Invalid Chat ID. Please check TELEGRAM_CHAT_ID.",
    401: "Invalid Bot Token. Please check TELEGRAM_BOT_TOKEN.",
    403: "Bot is not a member of the chat. Add bot to your group/channel.",
}


class QuizSubmission:
    def __init__(self, settings: Optional[Settings] = None, telegram_client: Optional[TelegramClient] = None):
        self.settings = settings or get_settings()
        self.telegram_client = telegram_client or TelegramClient.from_settings(self.settings)

    async def submit(self, payload: Any) -> RelayResult:
        submission = self.validate(payload)
        bot_token, chat_id = self.check_credentials()
        text = self.render_message(submission)
        reply = await self.telegram_client.send_message(
            bot_token=bot_token,
            chat_id=chat_id,
            text=text,
            parse_mode=self.settings.telegram_parse_mode,
        )
        result = TelegramResult.model_validate(reply)
        if not result.ok:
            message = self.describe_failure(result)
            logger.warning("Telegram rejected message: error_code=%s description=%s", result.error_code, result.description)
            raise DeliveryError(message, error_code=result.error_code)
        logger.info("Results for %s delivered", submission.student_name)
        return RelayResult(success=True, message=SUCCESS_MESSAGE)

    def validate(self, payload: Any) -> Submission:
        """Presence checks first, then conversion into a typed Submission.

        A score of 0 counts as present; only a missing key or null does not.
        Type errors after the presence check surface as pydantic
        ``ValidationError``.
        """
        if not isinstance(payload, dict):
            raise TypeError("Request body must be a JSON object")

        missing = [
            field for field in ("studentName", "answers", "total") if self._is_empty(payload.get(field))
        ]
        if payload.get("score") is None:
            missing.append("score")
        if missing:
            logger.info("Rejected submission, missing fields: %s", ", ".join(missing))
            raise ClientInputError(MISSING_FIELDS_MESSAGE)

        return Submission.model_validate(payload)

    @staticmethod
    def _is_empty(value: Any) -> bool:
        if isinstance(value, str):
            return not value.strip()
        return not value

    def check_credentials(self) -> Tuple[str, str]:
        bot_token = self.settings.telegram_bot_token
        chat_id = self.settings.telegram_chat_id
        logger.info(
            "Environment check: bot_token_set=%s chat_id_set=%s chat_id=%s",
            bool(bot_token),
            bool(chat_id),
            chat_id,
        )
        if not bot_token:
            raise ConfigurationError(
                "Telegram Bot Token is missing. Please set TELEGRAM_BOT_TOKEN in the environment."
            )
        if not chat_id:
            raise ConfigurationError(
                "Telegram Chat ID is missing. Please set TELEGRAM_CHAT_ID in the environment."
            )
        return bot_token, chat_id

    def render_message(self, submission: Submission) -> str:
        score = self._format_number(submission.score)
        total = self._format_number(submission.total)
        percent = self.percentage(submission.score, submission.total)

        lines = [
            f"📘 {self._escape(self.settings.relay_title)}",
            f"👤 Name: {self._escape(submission.student_name)}",
            f"{PASS_GLYPH} Score: {score}/{total} ({percent}%)",
            "",
            "📄 Details:",
        ]
        if self.settings.relay_detail_style == "flat":
            lines.extend(self._render_flat(submission.answers))
        else:
            lines.extend(self._fit(lines, self._render_grouped(submission.answers)))
        return "\n".join(lines)

    def _fit(self, header: List[str], details: List[str]) -> List[str]:
        """Drop trailing question lines until the message fits Telegram's limit"""
        limit = self.settings.telegram_max_message_length
        kept = list(details)
        while True:
            dropped = len(details) - len(kept)
            tail = ["", f"... and {dropped} more questions"] if dropped else []
            if not kept or len("\n".join(header + kept + tail)) <= limit:
                return kept + tail
            kept.pop()

    def _render_grouped(self, answers: List[AnswerRecord]) -> List[str]:
        groups: Dict[str, List[AnswerRecord]] = {}
        for answer in answers:
            prefix = answer.question_label.split(" ", 1)[0]
            groups.setdefault(prefix, []).append(answer)

        lines = []
        for prefix, group in groups.items():
            glyph = PASS_GLYPH if all(answer.correct for answer in group) else FAIL_GLYPH
            values = " | ".join(f'"{self._escape(answer.user_answer)}"' for answer in group)
            lines.append(f"{glyph} {self._escape(prefix)}: {values}")
        return lines

    def _render_flat(self, answers: List[AnswerRecord]) -> List[str]:
        limit = self.settings.relay_max_detail_lines
        lines = []
        for answer in answers[:limit]:
            glyph = PASS_GLYPH if answer.correct else FAIL_GLYPH
            line = f'{glyph} {self._escape(answer.question_label)}: "{self._escape(answer.user_answer)}"'
            accepted = answer.accepted_answers
            if not answer.correct and accepted:
                line += f" (correct: {self._escape(' OR '.join(accepted))})"
            lines.append(line)

        if len(answers) > limit:
            lines.append("")
            lines.append(f"... and {len(answers) - limit} more answers")
        return lines

    def _escape(self, text: str) -> str:
        parse_mode = self.settings.telegram_parse_mode
        if parse_mode and parse_mode.upper() == "HTML":
            return html.escape(text, quote=False)
        return text

    @staticmethod
    def percentage(score: float, total: float) -> int:
        # half-up, so 69.5 -> 70 and 70.5 -> 71
        return math.floor(score / total * 100 + 0.5)

    @staticmethod
    def _format_number(value: float) -> str:
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        return str(value)

    @staticmethod
    def describe_failure(result: TelegramResult) -> str:
        if result.error_code in DELIVERY_ERRORS:
            return DELIVERY_ERRORS[result.error_code]
        if result.description:
            return f"Telegram error: {result.description}"
        return "Failed to send message to Telegram"
