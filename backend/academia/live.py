"""Live transcription over the service's bidirectional audio stream.

``TranscriptionSession`` owns the network side and ``AudioSource`` owns the
microphone side. ``transcribe`` ties them together so both are released
together however the session ends: the user stops, the panel is torn down
(task cancellation) or the remote side errors.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Awaitable, Callable, Optional, Union

from .errors import GatewayError, TRANSCRIPTION_ERROR_MESSAGE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TranscriptFragment:
	text: str


@dataclass(frozen=True)
class SessionError:
	message: str


TranscriptEvent = Union[TranscriptFragment, SessionError]


class GenaiLiveConnection:
	"""Adapts a ``google-genai`` live session to frames in, transcript text out."""

	def __init__(self, session: Any) -> None:
		self._session = session

	async def send_audio(self, frame: bytes, mime_type: str) -> None:
		from google.genai import types

		await self._session.send_realtime_input(audio=types.Blob(data=frame, mime_type=mime_type))

	async def transcripts(self) -> AsyncIterator[str]:
		# receive() stops at the end of every model turn, so keep asking
		while True:
			async for message in self._session.receive():
				content = getattr(message, "server_content", None)
				transcription = getattr(content, "input_transcription", None) if content else None
				text = getattr(transcription, "text", None) if transcription else None
				if text:
					yield text


@asynccontextmanager
async def connect_genai(api_key: str, model: str) -> AsyncIterator[GenaiLiveConnection]:
	from google import genai
	from google.genai import types

	client = genai.Client(api_key=api_key)
	config = types.LiveConnectConfig(
		response_modalities=[types.Modality.AUDIO],
		input_audio_transcription=types.AudioTranscriptionConfig(),
	)
	async with client.aio.live.connect(model=model, config=config) as session:
		yield GenaiLiveConnection(session)


class TranscriptionSession:
	def __init__(self, connect: Callable[[], Any], *, sample_rate: int) -> None:
		self._connect = connect
		self._stack = AsyncExitStack()
		self._conn: Optional[Any] = None
		self._closed = False
		self.mime_type = f"audio/pcm;rate={sample_rate}"

	@property
	def closed(self) -> bool:
		return self._closed

	async def __aenter__(self) -> "TranscriptionSession":
		await self.open()
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()

	async def open(self) -> None:
		try:
			self._conn = await self._stack.enter_async_context(self._connect())
		except Exception as err:
			self._closed = True
			logger.warning("Live session failed to open: %s", err)
			raise GatewayError(f"Could not open transcription session: {err}") from err
		logger.info("Live session opened.")

	async def send_audio(self, frame: bytes) -> None:
		if self._conn is None or self._closed:
			raise RuntimeError("transcription session is not open")
		await self._conn.send_audio(frame, self.mime_type)

	async def events(self) -> AsyncIterator[TranscriptEvent]:
		if self._conn is None:
			raise RuntimeError("transcription session is not open")
		try:
			async for text in self._conn.transcripts():
				if self._closed:
					return
				yield TranscriptFragment(text)
		except asyncio.CancelledError:
			raise
		except Exception as err:
			if self._closed:
				return
			logger.error("Live session error: %s", err)
			yield SessionError(str(err))

	async def aclose(self) -> None:
		if self._closed and self._conn is None:
			return
		self._closed = True
		self._conn = None
		await self._stack.aclose()
		logger.info("Live session closed.")


class AudioSource(ABC):
	"""A microphone: ``open`` acquires it, ``frames`` yields 16-bit PCM, ``close`` releases it."""

	async def open(self) -> None:
		pass

	@abstractmethod
	def frames(self) -> AsyncIterator[bytes]:
		...

	async def close(self) -> None:
		pass


async def _pump(source: AudioSource, session: TranscriptionSession) -> None:
	async for frame in source.frames():
		await session.send_audio(frame)


async def _listen(session: TranscriptionSession, on_fragment: Callable[[str], Awaitable[None]]) -> None:
	async for event in session.events():
		if isinstance(event, SessionError):
			raise GatewayError(TRANSCRIPTION_ERROR_MESSAGE)
		await on_fragment(event.text)


async def transcribe(
	source: AudioSource,
	open_session: Callable[[], TranscriptionSession],
	on_fragment: Callable[[str], Awaitable[None]],
) -> None:
	"""Stream ``source`` into a new session until either side finishes.

	The source is acquired before any session exists, so a refused microphone
	never opens a connection. Both are released on every exit path.
	"""
	await source.open()
	try:
		async with open_session() as session:
			pump = asyncio.create_task(_pump(source, session))
			listen = asyncio.create_task(_listen(session, on_fragment))
			try:
				done, _ = await asyncio.wait({pump, listen}, return_when=asyncio.FIRST_COMPLETED)
			finally:
				for task in (pump, listen):
					task.cancel()
				await asyncio.gather(pump, listen, return_exceptions=True)
			for task in done:
				if not task.cancelled():
					task.result()
	finally:
		await source.close()
