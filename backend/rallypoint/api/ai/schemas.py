from pydantic import Field

from rallypoint.api.events.schemas import EventPublic
from rallypoint.core.response.base_model import CustomBaseModel


class GenerateDescriptionRequest(CustomBaseModel):
    title: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    date: str | None = Field(None)


class GenerateDescriptionResponse(CustomBaseModel):
    title: str
    generated_description: str


class ClassifyRequest(CustomBaseModel):
    title: str | None = Field(None)
    location: str | None = Field(None)
    description: str | None = Field(None)


class ClassifyResponse(CustomBaseModel):
    tags: list[str] = Field(default_factory=list)


class EventRecommendation(EventPublic):
    match_score: str
    recommendation_reason: str
