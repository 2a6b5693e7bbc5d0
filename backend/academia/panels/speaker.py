"""
Speaker panel: text-to-speech and live speech-to-text.

Text-to-speech is an ordinary request/response round trip through
``Panel.run``. Speech-to-text is different: it is a long-lived duplex
session, so it runs as a background task owned by the panel. That task is
cancelled by ``stop_transcription`` and by ``teardown``; either way the
microphone source and the network session are released together by
``live.transcribe``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional

from ..decoder import decode_media
from ..errors import (
    GatewayError,
    MicrophonePermissionError,
    MICROPHONE_PERMISSION_MESSAGE,
    TRANSCRIPTION_ERROR_MESSAGE,
)
from ..gemini_client import GeminiClient
from ..live import AudioSource, TranscriptionSession, transcribe
from ..prompts import format_request
from .base import ERROR, IDLE, Panel

logger = logging.getLogger(__name__)

SPEAKER_MODES = ("tts", "stt")


@dataclass
class SpeechAudio:
    """
    Decoded speech ready for playback.

    Attributes:
        pcm: Raw 16-bit little-endian mono PCM, exactly as returned
        sample_rate: Samples per second of ``pcm``
        mime_type: MIME type reported by the service
    """
    pcm: bytes
    sample_rate: int
    mime_type: str


class SpeakerPanel(Panel):
    """
    Holds the speech state for one mounted speaker panel.

    Attributes:
        mode: "tts" or "stt"
        text_to_speak: Last text submitted for synthesis
        transcript: Concatenated transcript fragments of the current recording
        recording: True while a transcription session is running
    """

    view = "speaker"

    def __init__(self, client_factory=None) -> None:
        super().__init__(client_factory)
        self.mode = "tts"
        self.text_to_speak = ""
        self.transcript = ""
        self.recording = False
        self._transcription: Optional[asyncio.Task] = None

    def set_mode(self, mode: str) -> None:
        if mode not in SPEAKER_MODES:
            raise ValueError(f"mode must be one of {SPEAKER_MODES}")
        self.mode = mode

    @property
    def audio(self) -> Optional[SpeechAudio]:
        return self.result if isinstance(self.result, SpeechAudio) else None

    # ------------------------------------------------------------------
    # Text-to-speech
    # ------------------------------------------------------------------

    async def speak(self, text: Optional[str] = None) -> bool:
        """
        Synthesize ``text`` (or the stored text) into playable audio.

        Returns:
            bool: True when new audio is available on ``audio``
        """
        if text is not None:
            self.text_to_speak = text
        if not self.text_to_speak.strip():
            return self.reject("Enter text to convert to speech.")
        request = format_request("speech", self.text_to_speak)

        async def action(client: GeminiClient) -> SpeechAudio:
            media = await client.generate_speech(request.prompt)
            pcm = decode_media(media, message="No audio data received.")
            return SpeechAudio(pcm=pcm, sample_rate=media.sample_rate or 0, mime_type=media.mime_type)

        return await self.run(action)

    # ------------------------------------------------------------------
    # Speech-to-text
    # ------------------------------------------------------------------

    async def transcribe(
        self,
        source: AudioSource,
        on_fragment: Optional[Callable[[str], Awaitable[None]]] = None,
    ) -> None:
        """
        Run one live transcription until the source ends, the remote side
        fails, or the recording is stopped.

        Args:
            source: Microphone to stream from; opened before any session
            on_fragment: Optional callback for each partial transcript
        """
        if self.recording:
            self.reject("Recording is already in progress.")
            return
        self.recording = True
        self.transcript = ""
        self.error = ""
        self.input_error = ""
        self.status = IDLE
        task = self.spawn(self._transcribe(source, on_fragment))
        self._transcription = task
        # wait() does not re-raise if the task gets cancelled by stop/teardown
        await asyncio.wait({task})

    async def _transcribe(
        self,
        source: AudioSource,
        on_fragment: Optional[Callable[[str], Awaitable[None]]],
    ) -> None:
        client: Optional[GeminiClient] = None

        def open_session() -> TranscriptionSession:
            nonlocal client
            client = self.client_factory()
            return client.open_transcription()

        async def deliver(text: str) -> None:
            self.transcript += text
            if on_fragment is not None:
                await on_fragment(text)

        try:
            await transcribe(source, open_session, deliver)
        except MicrophonePermissionError:
            logger.info("Microphone permission refused")
            self._transcription_failed(MICROPHONE_PERMISSION_MESSAGE)
        except GatewayError as err:
            self._transcription_failed(err.message)
        except Exception:
            logger.exception("Transcription failed")
            self._transcription_failed(TRANSCRIPTION_ERROR_MESSAGE)
        finally:
            self.recording = False
            self._transcription = None
            if client is not None:
                await client.aclose()

    def _transcription_failed(self, message: str) -> None:
        self.status = ERROR
        self.error = message

    async def stop_transcription(self) -> None:
        task = self._transcription
        if task is None:
            return
        task.cancel()
        await asyncio.gather(task, return_exceptions=True)

    def snapshot(self) -> Dict[str, Any]:
        data = super().snapshot()
        audio = self.audio
        data.update(
            mode=self.mode,
            text_to_speak=self.text_to_speak,
            has_audio=audio is not None,
            sample_rate=audio.sample_rate if audio else None,
            transcript=self.transcript,
            recording=self.recording,
        )
        return data
