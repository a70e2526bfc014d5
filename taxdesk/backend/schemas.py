from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ConversationTurnModel(BaseModel):
	model_config = ConfigDict(extra="ignore")

	role: Literal["user", "assistant", "system"]
	content: str = ""


class TaxChatRequest(BaseModel):
	model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

	message: str = Field(..., min_length=1, description="User's tax question.")
	history: List[ConversationTurnModel] = Field(
		default_factory=list,
		description="Earlier turns, oldest first.",
	)


class TaxChatReply(BaseModel):
	model_config = ConfigDict(extra="forbid")

	reply: str


class ErrorPayload(BaseModel):
	model_config = ConfigDict(extra="forbid")

	error: str
	detail: str


class HealthData(BaseModel):
	model_config = ConfigDict(extra="forbid")

	status: Literal["ok"] = "ok"
	app: str
	version: str
	generated_at: str
	responder: Literal["gemini", "openrouter", "openai", "local"]
	capabilities: Dict[str, bool] = Field(default_factory=dict)
	request_id: Optional[str] = None
