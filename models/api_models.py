"""
Pydantic data models for API requests and responses.
"""
from enum import Enum
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field


class Provider(str, Enum):
    """Upstream provider requested by the client."""
    GROQ = "groq"
    TOGETHER = "together"
    GEMINI = "gemini"
    AUTO = "auto"


class HistoryMessage(BaseModel):
    """Prior conversation turn."""
    role: Literal["user", "assistant"]
    content: str


class ChatSettings(BaseModel):
    """Behavioral configuration sent along with each chat message."""
    model_config = ConfigDict(populate_by_name=True)

    provider: Provider = Provider.AUTO
    model: str = "auto"  # "auto" means the provider's default model
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(4000, gt=0, alias="maxTokens")
    top_p: float = Field(0.95, gt=0.0, le=1.0, alias="topP")
    enable_thinking: bool = Field(True, alias="enableThinking")
    enable_search: bool = Field(False, alias="enableSearch")
    enable_rag: bool = Field(False, alias="enableRAG")
    system_prompt: str = Field("", alias="systemPrompt")


class ChatRequest(BaseModel):
    """Chat request model with conversation history."""
    message: Optional[str] = None
    settings: ChatSettings = Field(default_factory=ChatSettings)
    history: List[HistoryMessage] = Field(default_factory=list)


class ChatResponse(BaseModel):
    """Response envelope returned to the chat UI."""
    model_config = ConfigDict(populate_by_name=True)

    content: str
    model: str
    tokens: int
    processing_time_ms: int = Field(alias="processingTime")
    fallback_used: bool = Field(alias="fallbackUsed")
    provider: Optional[str] = None

    def to_payload(self) -> dict:
        """Serialize using the wire (camelCase) field names."""
        return self.model_dump(by_alias=True)
