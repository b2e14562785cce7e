import logging
from typing import Any
from uuid import uuid4

from fastapi import APIRouter
from fastapi import Body
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Response
from fastapi import status
from fastapi.responses import StreamingResponse
from pydantic import BaseModel

from transparency.api.deps import get_pipeline
from transparency.models.product import AttributeValue
from transparency.models.product import Product
from transparency.models.product import ProductCreate
from transparency.models.product import ScoreResponse
from transparency.services.follow_ups import FollowUp
from transparency.services.follow_ups import follow_up_questions
from transparency.services.pipeline import PipelineService
from transparency.services.pipeline import content_disposition

# Configure module logger
logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"

router = APIRouter(prefix="/products", tags=["Products"])
questions_router = APIRouter(tags=["Questions"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Product)
async def create_product(
    payload: ProductCreate,
    pipeline: PipelineService = Depends(get_pipeline),
) -> Product:
    """Creates a product and attaches its transparency questions.

    Question generation never fails the request: when the assistant is
    unavailable the fixed fallback questions are used.
    """
    request_id = str(uuid4())
    logger.info("[%s] Create product requested: %s", request_id, payload.name)
    return await pipeline.create(request_id, payload.name, payload.category, payload.attributes)


@router.get("/{product_id}", response_model=Product)
async def get_product(product_id: str, pipeline: PipelineService = Depends(get_pipeline)) -> Product:
    return await pipeline.fetch(str(uuid4()), product_id)


@router.post("/{product_id}/score", response_model=ScoreResponse)
async def score_product(
    product_id: str,
    answers: dict[str, AttributeValue] = Body(default_factory=dict),
    pipeline: PipelineService = Depends(get_pipeline),
) -> ScoreResponse:
    """Scores submitted answers and merges them into the product's attributes.

    Responds 500 when the assistant cannot score: no score is fabricated.
    """
    request_id = str(uuid4())
    logger.info("[%s] Scoring product %s with %d answers", request_id, product_id, len(answers))
    score, product = await pipeline.score(request_id, product_id, answers)
    return ScoreResponse(score=score, product=product)


@router.get("/{product_id}/report", response_class=StreamingResponse)
async def download_report(product_id: str, pipeline: PipelineService = Depends(get_pipeline)) -> StreamingResponse:
    """Streams the product's transparency report as a PDF attachment."""
    request_id = str(uuid4())
    logger.info("[%s] Report requested for product %s", request_id, product_id)
    filename, pdf_bytes = await pipeline.build_report(request_id, product_id)
    return StreamingResponse(
        iter([pdf_bytes]),
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": content_disposition(filename)},
    )


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_product(product_id: str, pipeline: PipelineService = Depends(get_pipeline)) -> Response:
    await pipeline.delete(str(uuid4()), product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


class FollowUpRequest(BaseModel):
    category: str | None = None
    answers: dict[str, Any] | None = None


class FollowUpResponse(BaseModel):
    followUps: list[FollowUp]


@questions_router.post("/generate-questions", response_model=FollowUpResponse)
async def generate_follow_ups(payload: FollowUpRequest) -> FollowUpResponse:
    """Lists the standard disclosures for a category that the answers leave open."""
    if not payload.category:
        raise HTTPException(status_code=400, detail="category required")
    return FollowUpResponse(followUps=follow_up_questions(payload.category, payload.answers))
