from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Protocol, Tuple

from taxdesk.backend.services.capability_service import ResponderKind
from taxdesk.backend.services.errors import ProviderUnavailableError
from taxdesk.backend.services.prompt_service import ConversationTurn, PromptEnvelope


class Responder(Protocol):
	kind: ResponderKind

	def answer(self, envelope: PromptEnvelope) -> Any:
		...


_GEMINI_ROLES = {"user": "user", "assistant": "model", "system": "user"}


def _gemini_history(history: Tuple[ConversationTurn, ...]) -> List[Dict[str, Any]]:
	return [
		{"role": _GEMINI_ROLES.get(turn.role, "user"), "parts": [{"text": turn.content}]}
		for turn in history
	]


class ConversationalResponder:
	"""Opens a fresh chat session per request, seeded with the caller's history."""

	kind: ResponderKind = "gemini"

	def __init__(self, *, client: Any, model: str):
		self._client = client
		self._model = model

	def answer(self, envelope: PromptEnvelope) -> Any:
		chat = self._client.chats.create(
			model=self._model,
			history=_gemini_history(envelope.history),
		)
		return chat.send_message(envelope.combined_prompt())


class CompletionResponder:
	"""One OpenAI-compatible chat-completions backend.

	OpenRouter and OpenAI differ only in the client they are handed (base URL,
	key, timeout) and the model name; answer extraction is left to the reply
	normalizer.
	"""

	def __init__(self, *, kind: ResponderKind, client: Any, model: str, max_tokens: int):
		self.kind = kind
		self._client = client
		self._model = model
		self._max_tokens = max_tokens

	def messages(self, envelope: PromptEnvelope) -> List[Dict[str, str]]:
		return [
			{"role": "system", "content": envelope.system_instruction},
			{"role": "user", "content": envelope.user_message},
		]

	def answer(self, envelope: PromptEnvelope) -> Any:
		return self._client.chat.completions.create(
			model=self._model,
			messages=self.messages(envelope),
			max_tokens=self._max_tokens,
		)


_ITR_REPLY = (
	"For a businessman in India, filing ITR depends on business type (proprietorship, partnership, LLP, company). "
	"Generally: maintain books of accounts, compute profits as per Income Tax rules, pay advance tax if applicable, "
	"and file the appropriate ITR form (ITR-3/ITR-4 for proprietors, ITR-5/ITR-6 for other entities). "
	"For exact form selection and tax planning, please consult a CA with your financial details."
)
_GST_REPLY = (
	"GST applies to supply of goods/services. Small suppliers below threshold may be exempt; "
	"registration, return filing and invoice rules apply. For specifics share turnover and activity."
)
_TDS_REPLY = (
	"TDS is tax deducted at source by the payer. Rates and applicability depend on payment type "
	"(salary, contractor, professional). Ensure correct deduction and timely deposit & filing."
)
GENERIC_REPLY = (
	"I can help with GST, TDS, audits, income tax returns and refunds. "
	"Please provide more details (e.g., business turnover, structure, or the specific question)."
)


@dataclass(frozen=True)
class LocalRule:
	name: str
	matches: Callable[[str], bool]
	reply: str


# Checked in order; the first matching rule wins.
LOCAL_RULES: Tuple[LocalRule, ...] = (
	LocalRule(
		name="itr",
		matches=lambda text: "itr" in text or ("income tax" in text and "business" in text),
		reply=_ITR_REPLY,
	),
	LocalRule(name="gst", matches=lambda text: "gst" in text, reply=_GST_REPLY),
	LocalRule(name="tds", matches=lambda text: "tds" in text, reply=_TDS_REPLY),
)


class LocalRuleResponder:
	kind: ResponderKind = "local"

	def __init__(self, rules: Tuple[LocalRule, ...] = LOCAL_RULES, fallback: str = GENERIC_REPLY):
		self._rules = rules
		self._fallback = fallback

	def answer(self, envelope: PromptEnvelope) -> str:
		text = (envelope.user_message or "").lower()
		for rule in self._rules:
			if rule.matches(text):
				return rule.reply
		return self._fallback


def build_gemini_client(*, api_key: str, timeout_s: float):
	try:
		from google import genai
		from google.genai import types
	except ImportError as exc:
		raise ProviderUnavailableError(
			responder="gemini",
			message="Google GenAI SDK not installed. Add 'google-genai' dependency.",
		) from exc
	return genai.Client(
		api_key=api_key,
		http_options=types.HttpOptions(timeout=int(timeout_s * 1000)),
	)


def build_openai_client(*, kind: ResponderKind, api_key: str, base_url: str, timeout_s: float):
	try:
		from openai import OpenAI
	except ImportError as exc:
		raise ProviderUnavailableError(
			responder=kind,
			message="OpenAI SDK not installed. Add 'openai' dependency.",
		) from exc
	return OpenAI(api_key=api_key, base_url=base_url, timeout=timeout_s)
