from __future__ import annotations

import logging
import math
import re
import unicodedata
from datetime import date
from typing import Any
from urllib.parse import quote

from transparency.core.config import settings
from transparency.core.exceptions import AssistantUnavailable
from transparency.core.exceptions import NotFound
from transparency.core.exceptions import ValidationError
from transparency.models.assistant_models import ReportAnalysis
from transparency.models.product import Product
from transparency.services.assistant import AssistantClient
from transparency.services.assistant import clean_questions
from transparency.services.doc_builder import render_pdf
from transparency.services.report_assembler import REASONING_SUMMARY_KEY
from transparency.services.report_assembler import assemble_report
from transparency.services.storage.base import ProductStore

# Configure module logger
logger = logging.getLogger(__name__)

FALLBACK_QUESTIONS: tuple[str, ...] = (
    "What are the main materials and their source/origin?",
    "What is the company's policy on labor ethics and fair wages?",
    "How is the product packaged to minimize environmental waste?",
)

DEFAULT_SCORE = 50
DEFAULT_REASONING_SUMMARY = "No reasoning summary provided."
MIN_SCORE = 0
MAX_SCORE = 100

FALLBACK_ANALYSIS = ReportAnalysis(
    executive_summary="Analysis unavailable. Failed to connect to AI service.",
    strengths=["Internal AI service is down."],
    concerns=["Report is not fully generated."],
    recommendations=["Restore AI service functionality."],
    category_analysis={"Error": "Data could not be fetched from AI service."},
)

REPORT_FILENAME_SUFFIX = "_Transparency_Report.pdf"


def report_filename(product_name: str) -> str:
    return re.sub(r"\s", "_", product_name) + REPORT_FILENAME_SUFFIX


def content_disposition(filename: str) -> str:
    """Attachment header value that survives any product name.

    ``filename`` carries a printable-ASCII fallback with quotes and
    backslashes replaced. When that differs from the real name, the real
    name follows as an RFC 5987 ``filename*`` parameter.
    """
    ascii_name = unicodedata.normalize("NFKD", filename).encode("ascii", "ignore").decode("ascii")
    ascii_name = re.sub(r'["\\]|[^\x20-\x7e]', "_", ascii_name)
    header = f'attachment; filename="{ascii_name}"'
    if ascii_name != filename:
        header += f"; filename*=UTF-8''{quote(filename, safe='')}"
    return header


def normalize_score(raw: float | None, clamp: bool) -> int:
    """Default an absent score to DEFAULT_SCORE and round halves up to a whole number.

    With *clamp* set, out-of-range values are pulled into [0, 100].
    """
    if raw is None:
        return DEFAULT_SCORE
    score = math.floor(raw + 0.5)
    if clamp:
        score = max(MIN_SCORE, min(MAX_SCORE, score))
    return score


class PipelineService:
    """Moves a product through Draft -> Assessed -> Scored and produces its report.

    Each method works on a transient copy fetched from the store and persists
    every mutation before returning.
    """

    def __init__(self, store: ProductStore, assistant: AssistantClient, clamp_scores: bool | None = None):
        self.store = store
        self.assistant = assistant
        self.clamp_scores = settings.clamp_assistant_scores if clamp_scores is None else clamp_scores

    async def _generate_questions(self, request_id: str, product: Product) -> list[str]:
        """Ask the assistant for questions. Any failure yields FALLBACK_QUESTIONS."""
        try:
            questions = await self.assistant.generate_questions(
                request_id,
                product_name=product.name,
                category=product.category,
                attributes=product.attributes,
                previous_answers={},
                asked_questions=[],
            )
        except AssistantUnavailable as e:
            logger.warning(
                "[%s] Question generation failed for product %s (%s). Using fallback questions.",
                request_id,
                product.id,
                e.reason,
            )
            return list(FALLBACK_QUESTIONS)
        except Exception:
            logger.exception(
                "[%s] Unexpected error generating questions for product %s. Using fallback questions.",
                request_id,
                product.id,
            )
            return list(FALLBACK_QUESTIONS)

        questions = clean_questions(questions)
        if not questions:
            logger.warning("[%s] Assistant returned empty questions for %s. Using fallback.", request_id, product.id)
            return list(FALLBACK_QUESTIONS)
        return questions

    async def create(
        self,
        request_id: str,
        name: str | None,
        category: str | None,
        attributes: dict[str, Any] | None = None,
    ) -> Product:
        if not isinstance(name, str) or not name.strip():
            raise ValidationError("Product name is required")
        if not isinstance(category, str) or not category.strip():
            raise ValidationError("Product category is required")

        # Persist the draft first so it has an id even if generation misbehaves
        product = await self.store.create(name=name, category=category, attributes=attributes or {})
        logger.info("[%s] Created draft product %s (%s)", request_id, product.id, product.category)

        product.questions = await self._generate_questions(request_id, product)
        product = await self.store.update(product)
        logger.info("[%s] Product %s assessed with %d questions", request_id, product.id, len(product.questions))
        return product

    async def fetch(self, request_id: str, product_id: str) -> Product:
        product = await self.store.get(product_id)
        if product is None:
            logger.info("[%s] Product %s not found", request_id, product_id)
            raise NotFound(product_id)
        return product

    async def score(self, request_id: str, product_id: str, answers: dict[str, Any]) -> tuple[int, Product]:
        """Score *answers* for a product.

        Assistant failures propagate: a score is never fabricated. Only the
        human-readable summary falls back to a placeholder.
        """
        product = await self.fetch(request_id, product_id)

        try:
            result = await self.assistant.score_answers(
                request_id,
                product_name=product.name,
                category=product.category,
                answers=answers,
            )
        except AssistantUnavailable as e:
            logger.error("[%s] Scoring failed for product %s: %s", request_id, product_id, str(e))
            raise

        score = normalize_score(result.score, self.clamp_scores)
        if result.score is not None and score != result.score:
            logger.warning("[%s] Assistant score %s stored as %d for product %s", request_id, result.score, score, product_id)
        summary = result.summary if result.summary is not None else DEFAULT_REASONING_SUMMARY

        product.transparency_score = score
        product.attributes = {**product.attributes, **answers, REASONING_SUMMARY_KEY: summary}
        product = await self.store.update(product)
        logger.info("[%s] Product %s scored %d", request_id, product_id, score)
        return score, product

    async def delete(self, request_id: str, product_id: str) -> None:
        if not await self.store.delete(product_id):
            logger.info("[%s] Delete requested for missing product %s", request_id, product_id)
            raise NotFound(product_id)
        logger.info("[%s] Deleted product %s", request_id, product_id)

    async def report_analysis(self, request_id: str, product: Product) -> ReportAnalysis:
        """Request narrative analysis, degrading to FALLBACK_ANALYSIS when the assistant is down."""
        try:
            return await self.assistant.generate_report_analysis(
                request_id,
                product_name=product.name,
                category=product.category,
                answers=product.attributes,
                transparency_score=product.transparency_score,
            )
        except AssistantUnavailable as e:
            logger.warning(
                "[%s] Report analysis unavailable for product %s (%s). Using degraded analysis.",
                request_id,
                product.id,
                e.reason,
            )
            return FALLBACK_ANALYSIS

    async def build_report(self, request_id: str, product_id: str, report_date: date | None = None) -> tuple[str, bytes]:
        """Return (filename, PDF bytes) for a product's transparency report."""
        product = await self.fetch(request_id, product_id)
        analysis = await self.report_analysis(request_id, product)
        blocks = assemble_report(product, analysis, report_date or date.today())
        pdf_bytes = await render_pdf(blocks, title=f"{product.name} Transparency Report")
        logger.info("[%s] Report for product %s rendered (%d blocks)", request_id, product_id, len(blocks))
        return report_filename(product.name), pdf_bytes
