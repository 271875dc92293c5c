# app/hooks.py
from typing import Protocol


class EngineHooks(Protocol):
    def load_start(self, *, source: str): ...
    def load_end(self, *, vertices: int, edges: int, names: int, ms: float, **extra): ...
    def query(self, kind: str, *, ms: float, size: int, **extra): ...
    def error(self, kind: str, *, exc: BaseException, **extra): ...


class NoopHooks:
    def load_start(self, **_):
        pass

    def load_end(self, **_):
        pass

    def query(self, *_, **__):
        pass

    def error(self, *_, **__):
        pass
