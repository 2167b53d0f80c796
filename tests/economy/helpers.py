from __future__ import annotations


class DummySessionBegin:
    async def __aenter__(self) -> object:
        return object()

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return False


class DummySessionLocal:
    def __init__(self) -> None:
        self.begin_calls = 0

    def begin(self) -> DummySessionBegin:
        self.begin_calls += 1
        return DummySessionBegin()
