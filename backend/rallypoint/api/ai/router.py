from typing import Annotated, List
from fastapi import APIRouter, Depends

from rallypoint.api.ai import service
from rallypoint.api.ai.schemas import (
    ClassifyRequest,
    ClassifyResponse,
    EventRecommendation,
    GenerateDescriptionRequest,
    GenerateDescriptionResponse,
)
from rallypoint.core.ai.client import GenerativeTextClient, get_text_generator
from rallypoint.core.auth.dependencies import AdminAuth, DependsAuth
from rallypoint.db.core import SessionDep

router = APIRouter(prefix="/ai")

TextGenerator = Annotated[GenerativeTextClient, Depends(get_text_generator)]


@router.post("/generate", summary="Draft an event description")
async def generate_description(
    user: AdminAuth, request: GenerateDescriptionRequest, client: TextGenerator
) -> GenerateDescriptionResponse:
    return await service.generate_description(client, request)


@router.post("/classify", summary="Suggest category tags for an event")
async def classify_event(
    user: AdminAuth, request: ClassifyRequest, client: TextGenerator
) -> ClassifyResponse:
    return await service.classify_event(client, request)


@router.get("/recommendations", summary="Recommend upcoming events for me")
async def recommend_events(
    user: DependsAuth, session: SessionDep, client: TextGenerator
) -> List[EventRecommendation]:
    return await service.recommend_events(session, client, user)
