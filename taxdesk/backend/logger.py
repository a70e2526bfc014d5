from __future__ import annotations

import logging
import os

_LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s:%(lineno)d - %(funcName)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _level_from_env() -> int:
	raw = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
	level = logging.getLevelName(raw)
	return level if isinstance(level, int) else logging.INFO


def configure_logging(level: int | None = None) -> None:
	logging.basicConfig(
		level=level if level is not None else _level_from_env(),
		format=_LOG_FORMAT,
		datefmt=_DATE_FORMAT,
	)
