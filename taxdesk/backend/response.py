from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict


def now_iso() -> str:
	return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def error_response(*, error: str, detail: str) -> Dict[str, str]:
	return {
		"error": error,
		"detail": detail,
	}
