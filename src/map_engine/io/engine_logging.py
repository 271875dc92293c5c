# io/engine_logging.py
import json
import logging
import sys
import threading

from map_engine.app.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def _default_json_logger(name="map_engine", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class EngineLogging(NoopHooks):
    """
    One place to shape and emit structured logs for dataset loading and query serving.
    """

    def __init__(
        self,
        name: str = "local",
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.name, self.debug = name, debug
        self.log = logger or _default_json_logger(level=level)
        self._queries = 0
        self._lock = threading.Lock()  # queries arrive from the server threadpool

    def _emit(self, level: str, msg: str, **extra):
        payload = {"engine": self.name}
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    # load lifecycle

    def load_start(self, *, source: str):
        self._emit("INFO", "load_start", source=source)

    def load_end(self, *, vertices: int, edges: int, names: int, ms: float, **extra):
        self._emit(
            "INFO",
            "load_end",
            vertices=vertices,
            edges=edges,
            names=names,
            ms=round(ms, 3),
            **extra,
        )

    # query serving

    def query(self, kind: str, *, ms: float, size: int, **extra):
        with self._lock:
            self._queries += 1
            seq = self._queries
        level = "INFO" if self.debug else "DEBUG"
        self._emit(level, kind, ms=round(ms, 3), size=size, seq=seq, **extra)

    def error(self, kind: str, *, exc: BaseException, **extra):
        self._emit(
            "WARNING", "query_error", query=kind, error=type(exc).__name__, detail=str(exc), **extra
        )

    @property
    def queries(self) -> int:
        return self._queries
