from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from taxdesk.backend import constants
from taxdesk.backend.logger import configure_logging
from taxdesk.backend.middleware import RequestContextMiddleware
from taxdesk.backend.response import error_response
from taxdesk.backend.routers import health, tax_chat
from taxdesk.backend.services.tax_chat_service import TaxChatService

load_dotenv()

_PUBLIC_DIR = Path(os.getenv("TAX_CHAT_PUBLIC_DIR", "") or Path(__file__).resolve().parents[2] / "public")


def create_app(service: TaxChatService | None = None) -> FastAPI:
	configure_logging()

	@asynccontextmanager
	async def lifespan(app: FastAPI):
		if getattr(app.state, "tax_chat_service", None) is None:
			app.state.tax_chat_service = TaxChatService.from_environ()
		yield

	app = FastAPI(
		title=constants.APP_NAME,
		version=constants.APP_VERSION,
		lifespan=lifespan,
	)
	app.state.tax_chat_service = service
	_register_middleware(app)
	_register_handlers(app)
	_register_routers(app)
	return app


def _register_middleware(app: FastAPI) -> None:
	app.add_middleware(RequestContextMiddleware)
	app.add_middleware(GZipMiddleware, minimum_size=1024)
	app.add_middleware(
		CORSMiddleware,
		allow_origins=constants.DEFAULT_CORS_ALLOW_ORIGINS,
		allow_methods=["*"],
		allow_headers=["*"],
	)


def _register_routers(app: FastAPI) -> None:
	app.include_router(tax_chat.router)
	app.include_router(health.router)
	# Mounted last: a mount at "/" shadows every route registered after it.
	if _PUBLIC_DIR.exists():
		app.mount("/", StaticFiles(directory=str(_PUBLIC_DIR), html=True), name="public")


def _register_handlers(app: FastAPI) -> None:
	@app.exception_handler(HTTPException)
	async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
		error = "Request failed"
		detail = _exc_message(exc.detail)
		if isinstance(exc.detail, dict):
			detail_error = exc.detail.get("error")
			detail_text = exc.detail.get("detail")
			if isinstance(detail_error, str) and detail_error.strip():
				error = detail_error.strip()
			if isinstance(detail_text, str):
				detail = detail_text
		payload = error_response(error=error, detail=detail)
		return JSONResponse(status_code=exc.status_code, content=payload)

	@app.exception_handler(StarletteHTTPException)
	async def handle_starlette_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
		payload = error_response(
			error="Request failed",
			detail=_exc_message(exc.detail),
		)
		return JSONResponse(status_code=exc.status_code, content=payload)

	@app.exception_handler(RequestValidationError)
	async def handle_request_validation_error(
		request: Request,
		exc: RequestValidationError,
	) -> JSONResponse:
		evidence = []
		for issue in exc.errors():
			loc = ".".join(str(part) for part in issue.get("loc", []) if part != "body")
			msg = issue.get("msg", "Invalid request.")
			evidence.append(f"{loc}: {msg}" if loc else msg)
		payload = error_response(
			error=constants.ERROR_INVALID_REQUEST,
			detail="; ".join(evidence) or "Request validation failed.",
		)
		return JSONResponse(status_code=400, content=payload)

	@app.exception_handler(Exception)
	async def handle_unexpected_exception(request: Request, exc: Exception) -> JSONResponse:
		payload = error_response(
			error=constants.ERROR_PROCESSING_REQUEST,
			detail=str(exc),
		)
		return JSONResponse(status_code=500, content=payload)


def _exc_message(detail: Any) -> str:
	if isinstance(detail, str):
		return detail
	if detail is None:
		return "Request failed."
	return str(detail)


app = create_app()


def run() -> None:
	import uvicorn

	host = os.getenv("HOST", constants.DEFAULT_HOST)
	try:
		port = int(os.getenv("PORT", str(constants.DEFAULT_PORT)))
	except ValueError:
		port = constants.DEFAULT_PORT
	uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
	run()
