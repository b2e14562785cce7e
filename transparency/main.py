import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import Request
from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from transparency.api.routes import questions_router
from transparency.api.routes import router
from transparency.core.config import settings
from transparency.core.exceptions import AssistantUnavailable
from transparency.core.exceptions import NotFound
from transparency.core.exceptions import StorageFailure
from transparency.core.exceptions import ValidationError
from transparency.core.logging import setup_logging
from transparency.services.assistant import AssistantClient
from transparency.services.doc_builder import DocBuilderError
from transparency.services.storage import build_store

setup_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    app.state.product_store = build_store(settings)
    app.state.assistant = AssistantClient()
    logger.info(
        "Application started (store: %s, assistant: %s)",
        type(app.state.product_store).__name__,
        settings.assistant_base_url,
    )
    try:
        yield
    finally:
        await app.state.assistant.aclose()
        await app.state.product_store.close()
        logger.info("Application shutdown complete")


app = FastAPI(title="Product Transparency Service", lifespan=lifespan)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
    logger.error(f"HTTP exception: {exc.detail} (status: {exc.status_code})")
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("Request validation failed: %s", exc.errors(), exc_info=False)
    return JSONResponse(
        {"error": "Input validation failed", "details": jsonable_encoder(exc.errors())},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(ValidationError)
async def product_validation_exception_handler(_request: Request, exc: ValidationError) -> JSONResponse:
    logger.error(f"Validation error: {str(exc)}")
    return JSONResponse({"error": str(exc)}, status_code=status.HTTP_400_BAD_REQUEST)


@app.exception_handler(NotFound)
async def not_found_exception_handler(_request: Request, exc: NotFound) -> JSONResponse:
    logger.info(f"Not found: {exc.product_id}")
    return JSONResponse({"error": "Not found"}, status_code=status.HTTP_404_NOT_FOUND)


@app.exception_handler(AssistantUnavailable)
async def assistant_exception_handler(_request: Request, exc: AssistantUnavailable) -> JSONResponse:
    logger.error(f"Assistant error: {str(exc)}")
    return JSONResponse({"error": "Assistant service unavailable"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(StorageFailure)
async def storage_exception_handler(_request: Request, exc: StorageFailure) -> JSONResponse:
    logger.error(f"Storage error: {str(exc)}")
    return JSONResponse({"error": str(exc)}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.exception_handler(DocBuilderError)
async def docbuilder_exception_handler(_request: Request, exc: DocBuilderError) -> JSONResponse:
    logger.error(f"DocBuilder error: {str(exc)}")
    return JSONResponse({"error": "Report generation failed"}, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.get("/health", status_code=status.HTTP_200_OK, tags=["Health"])
async def health_check() -> dict[str, str]:
    logger.info("Health check endpoint called")
    return {"status": "ok"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
    allow_credentials=True,
)
app.include_router(router)
app.include_router(questions_router)
