from fastapi import Depends
from fastapi import Request

from transparency.services.assistant import AssistantClient
from transparency.services.pipeline import PipelineService
from transparency.services.storage import ProductStore


# Shared instances are created by the application lifespan
def get_store(request: Request) -> ProductStore:
    return request.app.state.product_store


def get_assistant(request: Request) -> AssistantClient:
    return request.app.state.assistant


def get_pipeline(
    store: ProductStore = Depends(get_store),
    assistant: AssistantClient = Depends(get_assistant),
) -> PipelineService:
    return PipelineService(store, assistant)
