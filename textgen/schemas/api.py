from pydantic import BaseModel, Field
from typing import Any, List, Optional

class GenerateBody(BaseModel):
    model_name: str = Field(min_length=1)
    provider: str = Field(default="router")
    api_key: Optional[str] = None
    base_prompt: str = Field(min_length=1, max_length=20000)
    additional_user_text: Optional[str] = None
    video_url: Optional[str] = None
    temperature: Optional[float] = Field(default=None, ge=0.0, le=2.0)
    response_mime_type: Optional[str] = None
    safety_settings: Optional[List[Any]] = None
    use_search: bool = False
    stream: bool = False

class GenerateResponse(BaseModel):
    text: str
    grounding_metadata: Optional[Any] = None
    model_name: Optional[str] = None
    provider: Optional[str] = None
