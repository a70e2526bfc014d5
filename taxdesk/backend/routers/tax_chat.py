from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from taxdesk.backend.schemas import ErrorPayload, TaxChatReply, TaxChatRequest
from taxdesk.backend.services.errors import ProviderTransportError
from taxdesk.backend.services.tax_chat_service import TaxChatService


router = APIRouter(prefix="/api", tags=["tax-chat"])


def service_from_request(request: Request) -> TaxChatService:
	return request.app.state.tax_chat_service


@router.post(
	"/tax-chat",
	response_model=TaxChatReply,
	responses={400: {"model": ErrorPayload}, 500: {"model": ErrorPayload}},
)
def tax_chat(request: Request, payload: TaxChatRequest):
	service = service_from_request(request)
	history = [turn.model_dump() for turn in payload.history]
	try:
		reply = service.respond(payload.message, history)
	except ProviderTransportError as exc:
		raise HTTPException(
			status_code=exc.status_code,
			detail={"error": exc.message, "detail": exc.detail},
		) from exc
	return TaxChatReply(reply=reply)
