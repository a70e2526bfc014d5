from __future__ import annotations

from fastapi import APIRouter, Request

from taxdesk.backend import constants
from taxdesk.backend.response import now_iso
from taxdesk.backend.routers.tax_chat import service_from_request
from taxdesk.backend.schemas import HealthData


router = APIRouter(prefix="/api/health", tags=["health"])


@router.get("", response_model=HealthData)
def get_health(request: Request):
	service = service_from_request(request)
	return HealthData(
		app=constants.APP_NAME,
		version=constants.APP_VERSION,
		generated_at=now_iso(),
		responder=service.selected_kind,
		capabilities=service.capabilities.as_dict(),
		request_id=getattr(request.state, "request_id", None),
	)
