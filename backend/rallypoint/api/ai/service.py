import logging
import orjson
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rallypoint.api.ai.schemas import (
    ClassifyRequest,
    ClassifyResponse,
    EventRecommendation,
    GenerateDescriptionRequest,
    GenerateDescriptionResponse,
)
from rallypoint.api.events.models import Events
from rallypoint.api.users.models import Users
from rallypoint.core.ai.client import GenerativeTextClient, GenerativeTextError
from rallypoint.db.mixins import utcnow
from rallypoint.response import CustomHTTPException

logger = logging.getLogger(__name__)

RECOMMENDATION_CANDIDATES = 20
TAG_CATEGORIES = (
    "Environment",
    "Health",
    "Education",
    "Animal Welfare",
    "Community",
    "Crisis Relief",
    "Technology",
)


def description_prompt(request: GenerateDescriptionRequest) -> str:
    return (
        "You are an enthusiastic event organizer for a non-profit.\n"
        "Write a professional, inviting description (about 100 words) for a "
        "volunteer event.\n\n"
        f"Title: {request.title}\n"
        f"Location: {request.location}\n"
        f"Date: {request.date or 'Upcoming'}\n\n"
        'Use emojis, include a "Why Join?" section and keep it inspiring.'
    )


def classify_prompt(request: ClassifyRequest) -> str:
    return (
        "Analyze this volunteer event and suggest 3-5 relevant category tags.\n\n"
        f"Event Title: {request.title or 'N/A'}\n"
        f"Location: {request.location or 'N/A'}\n"
        f"Description: {request.description or 'N/A'}\n\n"
        "Return ONLY a JSON array of strings, without markdown. Prefer "
        f"categories such as: {', '.join(TAG_CATEGORIES)}.\n"
        'Example: ["Environment", "Outdoor", "Community"]'
    )


def recommendation_prompt(skills: list[str], catalog: list[dict]) -> str:
    events = orjson.dumps(catalog).decode()
    if skills:
        audience = f"User Skills: {orjson.dumps(skills).decode()}"
        task = "Find the top 3 matches based on these skills."
    else:
        audience = "User Skills: NONE (Beginner)."
        task = (
            'Find the top 3 events that are "Beginner Friendly", "General Help" '
            'or require "No Experience".'
        )
    return (
        "Act as a volunteer coordinator.\n"
        f"{audience}\n"
        f"Available Events: {events}\n\n"
        f"Task: {task}\n"
        'Return ONLY a JSON array: [{"eventId": 1, "matchScore": "High", '
        '"reason": "..."}]'
    )


async def generate_description(
    client: GenerativeTextClient, request: GenerateDescriptionRequest
) -> GenerateDescriptionResponse:
    try:
        text = await client.generate(description_prompt(request))
    except GenerativeTextError:
        logger.exception("Description generation failed")
        raise CustomHTTPException(
            502, "Failed to generate description", error_code="AI_UNAVAILABLE"
        )
    return GenerateDescriptionResponse(
        title=request.title, generated_description=text.strip()
    )


async def classify_event(
    client: GenerativeTextClient, request: ClassifyRequest
) -> ClassifyResponse:
    try:
        tags = await client.classify(classify_prompt(request))
    except GenerativeTextError:
        logger.exception("Event classification failed")
        return ClassifyResponse(tags=[])
    return ClassifyResponse(tags=tags)


async def recommend_events(
    session: AsyncSession, client: GenerativeTextClient, user: Users
) -> list[EventRecommendation]:
    events = list(
        await session.scalars(
            select(Events)
            .where(Events.date >= utcnow())
            .order_by(Events.date.asc())
            .limit(RECOMMENDATION_CANDIDATES)
        )
    )
    if not events:
        return []

    catalog = [
        {
            "id": event.id,
            "title": event.title,
            "description": event.description,
            "date": event.date.isoformat(),
            "location": event.location,
            "tags": event.tags or [],
        }
        for event in events
    ]
    try:
        suggestions = await client.generate_json(
            recommendation_prompt(user.skills or [], catalog)
        )
    except GenerativeTextError:
        logger.exception("Event recommendation failed")
        return []
    if not isinstance(suggestions, list):
        return []

    by_id = {event.id: event for event in events}
    recommendations = []
    for suggestion in suggestions:
        if not isinstance(suggestion, dict):
            continue
        try:
            event = by_id.get(int(suggestion.get("eventId")))
        except (TypeError, ValueError):
            continue
        # Ids the model made up are dropped.
        if event is None:
            continue
        values = {c.name: getattr(event, c.name) for c in Events.__table__.columns}
        recommendations.append(
            EventRecommendation(
                **values,
                match_score=str(suggestion.get("matchScore", "")),
                recommendation_reason=str(suggestion.get("reason", "")),
            )
        )
    return recommendations
