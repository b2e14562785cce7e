import logging
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from transparency.core.config import settings
from transparency.core.exceptions import AssistantUnavailable
from transparency.models.assistant_models import ReportAnalysis
from transparency.models.assistant_models import ScoreResult

# Configure module logger
logger = logging.getLogger(__name__)

GENERATE_QUESTIONS_PATH = "/generate-questions"
SCORE_ANSWERS_PATH = "/transparency-score"
REPORT_ANALYSIS_PATH = "/generate-report-analysis"


def default_timeout() -> httpx.Timeout:
    """Build the bounded wait applied to every assistant call."""
    return httpx.Timeout(
        settings.ASSISTANT_READ_TIMEOUT,
        connect=settings.ASSISTANT_CONNECT_TIMEOUT,
    )


def clean_questions(raw: list[Any]) -> list[str]:
    """Keep only non-empty strings, trimmed."""
    return [q.strip() for q in raw if isinstance(q, str) and q.strip()]


class AssistantClient:
    """Contract wrapper around the assistant's three JSON-over-HTTP operations.

    Every failure mode (timeout, network error, non-2xx status, malformed
    body) is raised as ``AssistantUnavailable``. The reason is logged so the
    modes can be told apart when diagnosing, but callers never branch on it.
    One attempt per call; there is no retry.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: httpx.Timeout | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.assistant_base_url,
            timeout=timeout or default_timeout(),
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _post(self, request_id: str, operation: str, path: str, payload: dict[str, Any]) -> dict[str, Any]:
        logger.info("[%s] Calling assistant operation '%s'", request_id, operation)
        try:
            rsp = await self._client.post(path, json=payload)
            rsp.raise_for_status()
        except httpx.TimeoutException as e:
            logger.error("[%s] Assistant '%s' timed out: %s", request_id, operation, str(e))
            raise AssistantUnavailable(operation, "timeout") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "[%s] Assistant '%s' returned status %d",
                request_id,
                operation,
                e.response.status_code,
            )
            raise AssistantUnavailable(operation, "status", f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error("[%s] Assistant '%s' unreachable: %s", request_id, operation, str(e))
            raise AssistantUnavailable(operation, "network") from e

        try:
            data = rsp.json()
        except ValueError as e:
            logger.error("[%s] Assistant '%s' returned a non-JSON body: %s", request_id, operation, rsp.text[:200])
            raise AssistantUnavailable(operation, "malformed", "response body is not JSON") from e

        if not isinstance(data, dict):
            logger.error(
                "[%s] Assistant '%s' returned %s instead of an object",
                request_id,
                operation,
                type(data).__name__,
            )
            raise AssistantUnavailable(operation, "malformed", "response is not a JSON object")

        logger.debug("[%s] Assistant '%s' responded with keys %s", request_id, operation, sorted(data))
        return data

    async def generate_questions(
        self,
        request_id: str,
        *,
        product_name: str,
        category: str,
        attributes: dict[str, Any],
        previous_answers: dict[str, Any] | None = None,
        asked_questions: list[str] | None = None,
    ) -> list[str]:
        operation = "generate-questions"
        data = await self._post(
            request_id,
            operation,
            GENERATE_QUESTIONS_PATH,
            {
                "productName": product_name,
                "category": category,
                "attributes": attributes,
                "previousAnswers": previous_answers or {},
                "askedQuestions": asked_questions or [],
            },
        )

        questions = data.get("questions")
        if not isinstance(questions, list):
            logger.error(
                "[%s] Malformed '%s' response: 'questions' missing or not a list (%s)",
                request_id,
                operation,
                type(questions).__name__,
            )
            raise AssistantUnavailable(operation, "malformed", "'questions' missing or not a list")

        filtered = clean_questions(questions)
        if not filtered:
            logger.warning("[%s] Assistant returned no usable questions", request_id)
            raise AssistantUnavailable(operation, "empty", "no non-empty questions returned")
        return filtered

    async def score_answers(
        self,
        request_id: str,
        *,
        product_name: str,
        category: str,
        answers: dict[str, Any],
    ) -> ScoreResult:
        operation = "score-answers"
        data = await self._post(
            request_id,
            operation,
            SCORE_ANSWERS_PATH,
            {"productName": product_name, "category": category, "answers": answers},
        )
        if isinstance(data.get("score"), bool):
            logger.error("[%s] Malformed '%s' response: boolean score", request_id, operation)
            raise AssistantUnavailable(operation, "malformed", "'score' is not a number")
        try:
            return ScoreResult.model_validate(data)
        except PydanticValidationError as e:
            logger.error("[%s] Malformed '%s' response: %s", request_id, operation, e.errors())
            raise AssistantUnavailable(operation, "malformed", "invalid score payload") from e

    async def generate_report_analysis(
        self,
        request_id: str,
        *,
        product_name: str,
        category: str,
        answers: dict[str, Any],
        transparency_score: int | None,
    ) -> ReportAnalysis:
        operation = "generate-report-analysis"
        data = await self._post(
            request_id,
            operation,
            REPORT_ANALYSIS_PATH,
            {
                "productName": product_name,
                "category": category,
                "answers": answers,
                "transparencyScore": transparency_score,
            },
        )
        try:
            return ReportAnalysis.model_validate(data)
        except PydanticValidationError as e:
            logger.error("[%s] Malformed '%s' response: %s", request_id, operation, e.errors())
            raise AssistantUnavailable(operation, "malformed", "invalid analysis payload") from e
