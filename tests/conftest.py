"""Shared fakes for the gateway, the live connection and the microphone."""

from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, MagicMock

import pytest

from academia.gemini_client import GroundedText, InlineMedia
from academia.live import AudioSource, TranscriptionSession
from academia.errors import MicrophonePermissionError


def make_client(**responses):
    """A gateway double; each keyword becomes an AsyncMock method.

    Values that are exceptions are raised, everything else is returned.
    """
    client = MagicMock()
    for name in (
        "generate",
        "generate_structured",
        "generate_grounded",
        "generate_multimodal",
        "analyze_image",
        "chat",
        "generate_image",
        "generate_speech",
    ):
        value = responses.get(name, "")
        if isinstance(value, BaseException):
            setattr(client, name, AsyncMock(side_effect=value))
        else:
            setattr(client, name, AsyncMock(return_value=value))
    client.aclose = AsyncMock()
    return client


@pytest.fixture
def client_factory():
    """Returns (factory, client) for a client built from keyword responses."""

    def build(**responses):
        client = make_client(**responses)
        return (lambda: client), client

    return build


def as_json(value) -> str:
    return json.dumps(value)


def grounded(text: str, chunks=None) -> GroundedText:
    return GroundedText(text=text, chunks=list(chunks or []))


def media(mime_type: str, data: str, sample_rate=None) -> InlineMedia:
    return InlineMedia(mime_type=mime_type, data=data, sample_rate=sample_rate)


class QueueAudioSource(AudioSource):
    """Frames pushed by the test; ``finish`` ends the stream."""

    _END = object()

    def __init__(self, *, denied: bool = False) -> None:
        self.denied = denied
        self.queue: asyncio.Queue = asyncio.Queue()
        self.opened = False
        self.released = False

    def push(self, frame: bytes) -> None:
        self.queue.put_nowait(frame)

    def finish(self) -> None:
        self.queue.put_nowait(self._END)

    async def open(self) -> None:
        if self.denied:
            raise MicrophonePermissionError("denied")
        self.opened = True

    async def frames(self):
        while True:
            item = await self.queue.get()
            if item is self._END:
                return
            yield item

    async def close(self) -> None:
        self.released = True


class FakeLiveConnection:
    """Echoes each frame back as a transcript fragment, or fails on demand."""

    def __init__(self, *, fail_after: int | None = None) -> None:
        self.sent: list[tuple[bytes, str]] = []
        self.fail_after = fail_after
        self._out: asyncio.Queue = asyncio.Queue()
        self.entered = False
        self.exited = False

    async def send_audio(self, frame: bytes, mime_type: str) -> None:
        self.sent.append((frame, mime_type))
        if self.fail_after is not None and len(self.sent) > self.fail_after:
            await self._out.put(RuntimeError("socket reset"))
        else:
            await self._out.put(frame.decode())

    async def transcripts(self):
        while True:
            item = await self._out.get()
            if isinstance(item, Exception):
                raise item
            yield item

    def connect(self):
        @asynccontextmanager
        async def _cm():
            self.entered = True
            try:
                yield self
            finally:
                self.exited = True

        return _cm()


def live_session(conn: FakeLiveConnection, sample_rate: int = 16000) -> TranscriptionSession:
    return TranscriptionSession(conn.connect, sample_rate=sample_rate)
