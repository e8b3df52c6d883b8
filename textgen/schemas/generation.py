from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from textgen.core import config


class GenerationRequest(BaseModel):
    # read-only once handed to generate_text
    model_config = ConfigDict(frozen=True)

    model_name: str
    provider: str
    api_key: SecretStr = SecretStr("")
    base_prompt: str
    additional_user_text: Optional[str] = None
    video_url: Optional[str] = None
    temperature: float = Field(default=config.DEFAULT_TEMPERATURE)
    response_mime_type: Optional[str] = None
    safety_settings: Optional[List[Any]] = None
    use_search: bool = False
    stream: bool = False


class GenerationResult(BaseModel):
    text: str
    grounding_metadata: Optional[Any] = None


class NormalizedToken(BaseModel):
    text: str
    accumulated: str


class InteractionType(str, Enum):
    PROMPT = "PROMPT"
    TOKEN = "TOKEN"
    RESPONSE = "RESPONSE"
    ERROR = "ERROR"


class InteractionEvent(BaseModel):
    """
    One lifecycle notification handed to the on_interaction observer.

    data holds the outgoing payload for PROMPT, the token text for TOKEN,
    the GenerationResult for RESPONSE and the exception for ERROR.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    type: InteractionType
    data: Any = None
    model_name: Optional[str] = None
