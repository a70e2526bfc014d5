from __future__ import annotations

import logging
import os
from typing import Callable, Dict, Iterable, Mapping

from taxdesk.backend.services import capability_service, prompt_service, reply_normalizer, selector_service
from taxdesk.backend.services.capability_service import (
	CapabilitySet,
	Environ,
	ProviderSettings,
	ResponderKind,
)
from taxdesk.backend.services.errors import ProviderTransportError, ProviderUnavailableError
from taxdesk.backend.services.prompt_service import HistoryItem
from taxdesk.backend.services.reply_normalizer import PROVIDER_LABELS
from taxdesk.backend.services.responders import (
	CompletionResponder,
	ConversationalResponder,
	LocalRuleResponder,
	Responder,
	build_gemini_client,
	build_openai_client,
)


logger = logging.getLogger(__name__)


def _gemini_responder(settings: ProviderSettings) -> Responder:
	client = build_gemini_client(api_key=settings.gemini_api_key, timeout_s=settings.timeout_s)
	return ConversationalResponder(client=client, model=settings.gemini_model)


def _openrouter_responder(settings: ProviderSettings) -> Responder:
	client = build_openai_client(
		kind="openrouter",
		api_key=settings.openrouter_api_key,
		base_url=settings.openrouter_base_url,
		timeout_s=settings.timeout_s,
	)
	return CompletionResponder(
		kind="openrouter",
		client=client,
		model=settings.openrouter_model,
		max_tokens=settings.max_tokens,
	)


def _openai_responder(settings: ProviderSettings) -> Responder:
	client = build_openai_client(
		kind="openai",
		api_key=settings.openai_api_key,
		base_url=settings.openai_base_url,
		timeout_s=settings.timeout_s,
	)
	return CompletionResponder(
		kind="openai",
		client=client,
		model=settings.openai_model,
		max_tokens=settings.max_tokens,
	)


RESPONDER_FACTORIES: Dict[ResponderKind, Callable[[ProviderSettings], Responder]] = {
	"gemini": _gemini_responder,
	"openrouter": _openrouter_responder,
	"openai": _openai_responder,
	"local": lambda _settings: LocalRuleResponder(),
}


class TaxChatService:
	"""Answers one tax question per call with the responder the capabilities allow.

	Responders are built once, before the first request, and shared read-only
	across requests. The selected responder is fixed for the life of the
	service because the capability set never changes.
	"""

	def __init__(self, *, capabilities: CapabilitySet, responders: Mapping[ResponderKind, Responder]):
		self.capabilities = capabilities
		self._responders: Dict[ResponderKind, Responder] = dict(responders)
		self._responders.setdefault("local", LocalRuleResponder())
		kind = selector_service.select(capabilities)
		if kind not in self._responders:
			raise ProviderUnavailableError(
				responder=kind,
				message=f"No {PROVIDER_LABELS.get(kind, kind)} responder was built for the configured credentials.",
			)

	@classmethod
	def from_environ(cls, environ: Environ | None = None) -> "TaxChatService":
		env = os.environ if environ is None else environ
		capabilities = capability_service.detect(env)
		settings = capability_service.load_provider_settings(env)
		kind = selector_service.select(capabilities)
		if kind == "local":
			logger.info("No provider API key configured, answering with local rules")
		return cls(
			capabilities=capabilities,
			responders={kind: RESPONDER_FACTORIES[kind](settings)},
		)

	@property
	def selected_kind(self) -> ResponderKind:
		return selector_service.select(self.capabilities)

	def respond(self, message: str, history: Iterable[HistoryItem] = ()) -> str:
		envelope = prompt_service.build(message, history)
		responder = self._responders[self.selected_kind]
		kind = responder.kind
		try:
			raw = responder.answer(envelope)
		except Exception as exc:
			logger.exception("%s responder failed", PROVIDER_LABELS.get(kind, kind))
			raise ProviderTransportError(responder=kind, detail=str(exc)) from exc
		reply = reply_normalizer.normalize(raw, kind)
		logger.info("[tax-chat] Using responder: %s", PROVIDER_LABELS.get(kind, kind))
		return reply
