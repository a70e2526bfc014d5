from __future__ import annotations

from typing import Tuple

from taxdesk.backend.services.capability_service import CapabilitySet, ResponderKind


RESPONDER_PRIORITY: Tuple[ResponderKind, ...] = ("gemini", "openrouter", "openai", "local")


def select(caps: CapabilitySet, priority: Tuple[ResponderKind, ...] = RESPONDER_PRIORITY) -> ResponderKind:
	for kind in priority:
		if caps.available(kind):
			return kind
	return "local"
