from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Literal, Mapping, Tuple, Union


TurnRole = Literal["user", "assistant", "system"]

PERSONA_INSTRUCTION = (
	"You are a qualified Indian tax consultant. "
	"Answer users' tax questions (GST, TDS, audit, income tax, refunds) in simple language. "
	"If exact legal advice or latest law changes are needed, remind them to consult CA Shivani Jain directly."
)


@dataclass(frozen=True)
class ConversationTurn:
	role: TurnRole
	content: str


@dataclass(frozen=True)
class PromptEnvelope:
	system_instruction: str
	history: Tuple[ConversationTurn, ...]
	user_message: str

	def combined_prompt(self) -> str:
		return f"{self.system_instruction}\n\nUser question: {self.user_message}"


HistoryItem = Union[ConversationTurn, Mapping[str, Any]]


def _coerce_turn(item: HistoryItem) -> ConversationTurn:
	if isinstance(item, ConversationTurn):
		return item
	role = str(item.get("role") or "user")
	if role not in ("user", "assistant", "system"):
		role = "user"
	return ConversationTurn(role=role, content=str(item.get("content") or ""))  # type: ignore[arg-type]


def build(user_message: str, history: Iterable[HistoryItem] = ()) -> PromptEnvelope:
	return PromptEnvelope(
		system_instruction=PERSONA_INSTRUCTION,
		history=tuple(_coerce_turn(item) for item in history),
		user_message=user_message,
	)
