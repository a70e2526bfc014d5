from unittest import TestCase

from taxdesk.backend.services import capability_service
from taxdesk.backend.services.capability_service import CapabilitySet


class CapabilityServiceTests(TestCase):
	def test_empty_environment_enables_only_local(self) -> None:
		caps = capability_service.detect({})
		self.assertEqual(caps, CapabilitySet(gemini=False, openrouter=False, openai=False))
		self.assertTrue(caps.available("local"))
		self.assertFalse(caps.available("gemini"))

	def test_present_keys_enable_backends(self) -> None:
		caps = capability_service.detect(
			{"GEMINI_API_KEY": "g-key", "OPENROUTER_API_KEY": "or-key", "OPENAI_API_KEY": "sk-key"}
		)
		self.assertTrue(caps.gemini)
		self.assertTrue(caps.openrouter)
		self.assertTrue(caps.openai)

	def test_empty_and_blank_keys_are_unavailable(self) -> None:
		caps = capability_service.detect({"GEMINI_API_KEY": "", "OPENROUTER_API_KEY": "   ", "OPENAI_API_KEY": None})
		self.assertFalse(caps.gemini)
		self.assertFalse(caps.openrouter)
		self.assertFalse(caps.openai)

	def test_capability_set_is_immutable(self) -> None:
		caps = capability_service.detect({"OPENAI_API_KEY": "sk-key"})
		with self.assertRaises(AttributeError):
			caps.openai = False  # type: ignore[misc]

	def test_detect_logs_flags_without_key_values(self) -> None:
		with self.assertLogs("taxdesk.backend.services.capability_service", level="INFO") as logs:
			capability_service.detect({"OPENAI_API_KEY": "sk-secret-value"})
		output = "\n".join(logs.output)
		self.assertIn("OPENAI=True", output)
		self.assertIn("GEMINI=False", output)
		self.assertNotIn("sk-secret-value", output)

	def test_as_dict_reports_local_as_always_available(self) -> None:
		self.assertEqual(
			CapabilitySet(openrouter=True).as_dict(),
			{"gemini": False, "openrouter": True, "openai": False, "local": True},
		)

	def test_provider_settings_defaults(self) -> None:
		settings = capability_service.load_provider_settings({})
		self.assertEqual(settings.gemini_model, "gemini-2.5-flash")
		self.assertEqual(settings.openrouter_model, "gpt-4o-mini")
		self.assertEqual(settings.openai_model, "gpt-3.5-turbo")
		self.assertEqual(settings.max_tokens, 800)
		self.assertEqual(settings.timeout_s, 30.0)

	def test_provider_settings_overrides_and_invalid_numbers(self) -> None:
		settings = capability_service.load_provider_settings(
			{
				"OPENROUTER_MODEL": "meta-llama/llama-3-8b-instruct",
				"TAX_CHAT_PROVIDER_TIMEOUT_S": "not-a-number",
				"TAX_CHAT_MAX_TOKENS": "0",
			}
		)
		self.assertEqual(settings.openrouter_model, "meta-llama/llama-3-8b-instruct")
		self.assertEqual(settings.timeout_s, 30.0)
		self.assertEqual(settings.max_tokens, 800)

	def test_non_finite_timeout_falls_back_to_default(self) -> None:
		for raw in ("inf", "-inf", "nan", "-5"):
			settings = capability_service.load_provider_settings({"TAX_CHAT_PROVIDER_TIMEOUT_S": raw})
			self.assertEqual(settings.timeout_s, 30.0, raw)
