from typing import Optional

from pydantic import BaseModel


class ResponsesResponse(BaseModel):
    account_id: int
    responses: dict[str, str]


class ResponsesUpdateResponse(BaseModel):
    updated: list[str]
    failed: dict[str, str] = {}


class PreviewRequest(BaseModel):
    message: Optional[str] = None


class PreviewResponse(BaseModel):
    message: str
    reply: str


class AIFeatureResponse(BaseModel):
    plan: str
    ai_fallback: bool
    custom_prompt_configured: bool
