from __future__ import annotations

from taxdesk.backend import constants


class TaxChatServiceError(Exception):
	def __init__(self, *, status_code: int, message: str):
		super().__init__(message)
		self.status_code = status_code
		self.message = message


class ProviderTransportError(TaxChatServiceError):
	"""The chosen responder failed while calling its backend."""

	def __init__(self, *, responder: str, detail: str):
		super().__init__(status_code=500, message=constants.ERROR_PROCESSING_REQUEST)
		self.responder = responder
		self.detail = detail


class ProviderUnavailableError(TaxChatServiceError):
	def __init__(self, *, responder: str, message: str):
		super().__init__(status_code=503, message=message)
		self.responder = responder
