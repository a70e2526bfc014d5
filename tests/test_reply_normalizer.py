from types import SimpleNamespace
from unittest import TestCase

from fakes import completion

from taxdesk.backend.services import reply_normalizer


class _BlockedResponse:
	@property
	def text(self) -> str:
		raise ValueError("response was blocked")


class ReplyNormalizerTests(TestCase):
	def test_gemini_text(self) -> None:
		self.assertEqual(reply_normalizer.normalize(SimpleNamespace(text="Answer"), "gemini"), "Answer")

	def test_gemini_missing_text_falls_back(self) -> None:
		self.assertEqual(
			reply_normalizer.normalize(SimpleNamespace(text=None), "gemini"),
			"Sorry, no answer from Gemini.",
		)

	def test_gemini_property_error_falls_back(self) -> None:
		self.assertEqual(reply_normalizer.normalize(_BlockedResponse(), "gemini"), "Sorry, no answer from Gemini.")

	def test_completion_message_content(self) -> None:
		self.assertEqual(reply_normalizer.normalize(completion("Answer"), "openai"), "Answer")
		self.assertEqual(reply_normalizer.normalize(completion("Answer"), "openrouter"), "Answer")

	def test_completion_sdk_objects(self) -> None:
		raw = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="Answer"))])
		self.assertEqual(reply_normalizer.normalize(raw, "openai"), "Answer")

	def test_openrouter_falls_back_to_choice_text(self) -> None:
		raw = {"choices": [{"text": "Legacy answer"}]}
		self.assertEqual(reply_normalizer.normalize(raw, "openrouter"), "Legacy answer")

	def test_openai_does_not_read_choice_text(self) -> None:
		raw = {"choices": [{"text": "Legacy answer"}]}
		self.assertEqual(reply_normalizer.normalize(raw, "openai"), "Sorry, no answer from OpenAI.")

	def test_missing_choices_falls_back(self) -> None:
		self.assertEqual(reply_normalizer.normalize({}, "openrouter"), "Sorry, no answer from OpenRouter.")
		self.assertEqual(reply_normalizer.normalize({"choices": []}, "openai"), "Sorry, no answer from OpenAI.")
		self.assertEqual(
			reply_normalizer.normalize({"error": {"message": "bad key"}}, "openai"),
			"Sorry, no answer from OpenAI.",
		)

	def test_malformed_shapes_never_raise(self) -> None:
		for raw in (None, "", 42, {"choices": "nope"}, {"choices": [None]}, {"choices": [{"message": "x"}]}):
			self.assertEqual(reply_normalizer.normalize(raw, "openrouter"), "Sorry, no answer from OpenRouter.")

	def test_empty_content_falls_back(self) -> None:
		self.assertEqual(reply_normalizer.normalize(completion("   "), "openai"), "Sorry, no answer from OpenAI.")

	def test_local_text_passes_through(self) -> None:
		self.assertEqual(reply_normalizer.normalize("Rule reply", "local"), "Rule reply")
