from typing import Optional

from pydantic import BaseModel, Field

# Defaults shared by the settings layer and direct construction
DEFAULT_TIMEOUT = 30.0
MAX_RESPONSE_SIZE = 1_048_576
DEFAULT_MAX_TOKENS = 1024


class ProviderConfig(BaseModel):
    """Resolved provider settings for a single request.

    Built once before streaming starts and never mutated afterwards.
    """

    name: str
    model: str
    api_key: Optional[str] = None
    api_base_url: Optional[str] = None  # overrides the provider default
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_response_bytes: int = Field(default=MAX_RESPONSE_SIZE, gt=0)
    max_tokens: int = Field(default=DEFAULT_MAX_TOKENS, gt=0)

    class Config:
        frozen = True
