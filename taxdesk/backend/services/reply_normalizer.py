from __future__ import annotations

import logging
from typing import Any, Callable, Dict

from taxdesk.backend.services.capability_service import ResponderKind


logger = logging.getLogger(__name__)

PROVIDER_LABELS: Dict[ResponderKind, str] = {
	"gemini": "Gemini",
	"openrouter": "OpenRouter",
	"openai": "OpenAI",
	"local": "LocalResponder",
}


def fallback_reply(kind: ResponderKind) -> str:
	return f"Sorry, no answer from {PROVIDER_LABELS.get(kind, kind)}."


def _field(obj: Any, name: str) -> Any:
	if isinstance(obj, dict):
		return obj.get(name)
	return getattr(obj, name, None)


def _text(value: Any) -> str:
	if isinstance(value, str) and value.strip():
		return value
	return ""


def _first_choice(raw: Any) -> Any:
	choices = _field(raw, "choices")
	if not isinstance(choices, (list, tuple)) or not choices:
		return None
	return choices[0]


def _gemini_text(raw: Any) -> str:
	return _text(_field(raw, "text"))


def _message_content(raw: Any) -> str:
	choice = _first_choice(raw)
	if choice is None:
		return ""
	return _text(_field(_field(choice, "message"), "content"))


def _message_content_or_text(raw: Any) -> str:
	content = _message_content(raw)
	if content:
		return content
	choice = _first_choice(raw)
	if choice is None:
		return ""
	return _text(_field(choice, "text"))


_EXTRACTORS: Dict[ResponderKind, Callable[[Any], str]] = {
	"gemini": _gemini_text,
	"openrouter": _message_content_or_text,
	"openai": _message_content,
	"local": _text,
}


def normalize(raw: Any, kind: ResponderKind) -> str:
	extractor = _EXTRACTORS.get(kind, _text)
	try:
		reply = extractor(raw)
	except Exception:
		# Provider objects can raise from computed properties (e.g. blocked candidates).
		logger.warning("Could not read %s result", PROVIDER_LABELS.get(kind, kind), exc_info=True)
		reply = ""
	if reply:
		return reply
	logger.warning("No answer text in %s result", PROVIDER_LABELS.get(kind, kind))
	return fallback_reply(kind)
