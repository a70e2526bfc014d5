from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Literal, Mapping, Optional

from taxdesk.backend import constants


logger = logging.getLogger(__name__)

ResponderKind = Literal["gemini", "openrouter", "openai", "local"]

Environ = Mapping[str, Optional[str]]


@dataclass(frozen=True)
class CapabilitySet:
	"""Backends usable in this run, derived once from configured credentials."""

	gemini: bool = False
	openrouter: bool = False
	openai: bool = False

	def available(self, kind: ResponderKind) -> bool:
		if kind == "local":
			return True
		return bool(getattr(self, kind, False))

	def as_dict(self) -> dict[str, bool]:
		return {
			"gemini": self.gemini,
			"openrouter": self.openrouter,
			"openai": self.openai,
			"local": True,
		}


@dataclass(frozen=True)
class ProviderSettings:
	gemini_api_key: str = ""
	gemini_model: str = constants.DEFAULT_GEMINI_MODEL
	openrouter_api_key: str = ""
	openrouter_model: str = constants.DEFAULT_OPENROUTER_MODEL
	openrouter_base_url: str = constants.DEFAULT_OPENROUTER_BASE_URL
	openai_api_key: str = ""
	openai_model: str = constants.DEFAULT_OPENAI_MODEL
	openai_base_url: str = constants.DEFAULT_OPENAI_BASE_URL
	max_tokens: int = constants.DEFAULT_MAX_TOKENS
	timeout_s: float = constants.DEFAULT_PROVIDER_TIMEOUT_S


def _str_env(environ: Environ, name: str, default: str = "") -> str:
	raw = environ.get(name)
	if raw is None:
		return default
	return str(raw).strip() or default


def _float_env(environ: Environ, name: str, default: float) -> float:
	raw = _str_env(environ, name)
	if not raw:
		return default
	try:
		value = float(raw)
	except ValueError:
		logger.warning("%s=%r is not numeric, using %s", name, raw, default)
		return default
	if not math.isfinite(value) or value <= 0:
		logger.warning("%s=%r is out of range, using %s", name, raw, default)
		return default
	return value


def _int_env(environ: Environ, name: str, default: int, minimum: int = 1) -> int:
	raw = _str_env(environ, name)
	if not raw:
		return default
	try:
		value = int(raw)
	except ValueError:
		logger.warning("%s=%r is not an integer, using %s", name, raw, default)
		return default
	return value if value >= minimum else default


def detect(environ: Environ) -> CapabilitySet:
	caps = CapabilitySet(
		gemini=bool(_str_env(environ, constants.GEMINI_API_KEY_ENV)),
		openrouter=bool(_str_env(environ, constants.OPENROUTER_API_KEY_ENV)),
		openai=bool(_str_env(environ, constants.OPENAI_API_KEY_ENV)),
	)
	logger.info(
		"LLM env flags: GEMINI=%s OPENROUTER=%s OPENROUTER_MODEL=%s OPENAI=%s",
		caps.gemini,
		caps.openrouter,
		_str_env(environ, "OPENROUTER_MODEL", constants.DEFAULT_OPENROUTER_MODEL),
		caps.openai,
	)
	return caps


def load_provider_settings(environ: Environ) -> ProviderSettings:
	return ProviderSettings(
		gemini_api_key=_str_env(environ, constants.GEMINI_API_KEY_ENV),
		gemini_model=_str_env(environ, "GEMINI_MODEL", constants.DEFAULT_GEMINI_MODEL),
		openrouter_api_key=_str_env(environ, constants.OPENROUTER_API_KEY_ENV),
		openrouter_model=_str_env(environ, "OPENROUTER_MODEL", constants.DEFAULT_OPENROUTER_MODEL),
		openrouter_base_url=_str_env(environ, "OPENROUTER_BASE_URL", constants.DEFAULT_OPENROUTER_BASE_URL),
		openai_api_key=_str_env(environ, constants.OPENAI_API_KEY_ENV),
		openai_model=_str_env(environ, "OPENAI_MODEL", constants.DEFAULT_OPENAI_MODEL),
		openai_base_url=_str_env(environ, "OPENAI_BASE_URL", constants.DEFAULT_OPENAI_BASE_URL),
		max_tokens=_int_env(environ, "TAX_CHAT_MAX_TOKENS", constants.DEFAULT_MAX_TOKENS),
		timeout_s=_float_env(environ, "TAX_CHAT_PROVIDER_TIMEOUT_S", constants.DEFAULT_PROVIDER_TIMEOUT_S),
	)
