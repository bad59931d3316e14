"""Console logging for farm core.

Records carry an optional ``[source]`` tag and a ``key=value`` payload.
``timed`` reports the duration of an RPC-bound step at debug level.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Any, Iterator, Mapping

LOGGER_NAME = "farm_core"


def _render_payload(payload: Any) -> str:
    if isinstance(payload, Mapping):
        return " ".join(f"{k}={v}" for k, v in payload.items())
    return str(payload)


class FarmLogger:
    """Source-tagged wrapper around :mod:`logging` shared by clients and services."""

    def __init__(self, name: str = LOGGER_NAME) -> None:
        self._logger = logging.getLogger(name)
        if not self._logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(
                logging.Formatter("%(asctime)s - %(levelname)s - %(message)s", datefmt="%Y-%m-%d %H:%M:%S")
            )
            self._logger.addHandler(handler)
        self.configure()

    def configure(self, level: int = logging.INFO) -> None:
        self._logger.setLevel(level)

    # ------------------------------------------------------------------
    def _emit(self, level: int, msg: str, source: str | None, payload: Any | None) -> None:
        if self._logger.isEnabledFor(level):
            self._logger.log(level, self._format(msg, source, payload))

    def debug(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.DEBUG, msg, source, payload)

    def info(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.INFO, msg, source, payload)

    def warning(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.WARNING, msg, source, payload)

    def error(self, msg: str, source: str | None = None, payload: Any | None = None) -> None:
        self._emit(logging.ERROR, msg, source, payload)

    @contextmanager
    def timed(self, name: str, source: str | None = None) -> Iterator[None]:
        """Log ``name took N ms`` at debug level when the block exits."""
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            self.debug(f"{name} took {elapsed_ms:.1f}ms", source)

    @staticmethod
    def _format(msg: str, source: str | None, payload: Any | None = None) -> str:
        base = f"[{source}] {msg}" if source else msg
        if payload is not None:
            base = f"{base} {_render_payload(payload)}"
        return base


log = FarmLogger()


def configure_console_log(debug: bool = False) -> None:
    """Switch the farm core logger between INFO and DEBUG."""
    log.configure(logging.DEBUG if debug else logging.INFO)


__all__ = ["log", "configure_console_log", "FarmLogger"]
