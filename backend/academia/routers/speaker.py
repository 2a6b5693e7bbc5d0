from __future__ import annotations
import json
import logging
from typing import AsyncIterator, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import Response
from pydantic import BaseModel

from ..errors import MicrophonePermissionError, MICROPHONE_PERMISSION_MESSAGE
from ..live import AudioSource
from ..panels import SpeakerPanel
from ..shell import Shell, get_shell
from .shell import require_panel, require_shell

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/shell/{shell_id}/speaker", tags=["speaker"])


class SpeakRequest(BaseModel):
	text: Optional[str] = None


class ModeRequest(BaseModel):
	mode: Literal["tts", "stt"]


class WebSocketAudioSource(AudioSource):
	"""The browser's microphone, relayed over the socket.

	The client first reports whether it got the microphone, then streams
	binary PCM frames and finally a stop message.
	"""

	def __init__(self, websocket: WebSocket) -> None:
		self.websocket = websocket

	async def open(self) -> None:
		message = await self.websocket.receive_json()
		if message.get("type") != "start":
			raise MicrophonePermissionError(MICROPHONE_PERMISSION_MESSAGE)

	async def frames(self) -> AsyncIterator[bytes]:
		while True:
			message = await self.websocket.receive()
			if message["type"] == "websocket.disconnect":
				return
			if message.get("bytes"):
				yield message["bytes"]
				continue
			text = message.get("text")
			if text and json.loads(text).get("type") == "stop":
				return


@router.post("/mode")
async def set_mode(req: ModeRequest, shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, SpeakerPanel)
	panel.set_mode(req.mode)
	return panel.snapshot()


@router.post("/speak")
async def speak(req: SpeakRequest, shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, SpeakerPanel)
	await panel.speak(req.text)
	return panel.snapshot()


@router.get("/audio")
async def audio(shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, SpeakerPanel)
	speech = panel.audio
	if speech is None:
		raise HTTPException(status_code=404, detail="No speech generated yet")
	return Response(
		content=speech.pcm,
		media_type=f"audio/L16;rate={speech.sample_rate};channels=1",
	)


@router.post("/stop")
async def stop(shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, SpeakerPanel)
	await panel.stop_transcription()
	return panel.snapshot()


@router.websocket("/transcribe")
async def transcribe(websocket: WebSocket, shell_id: str) -> None:
	shell = get_shell(shell_id)
	if shell is None or not isinstance(shell.panel, SpeakerPanel):
		await websocket.close(code=4404)
		return
	panel = shell.panel
	await websocket.accept()

	async def forward(text: str) -> None:
		await websocket.send_json({"type": "fragment", "text": text})

	await panel.transcribe(WebSocketAudioSource(websocket), forward)
	try:
		message = panel.error or panel.input_error
		if message:
			await websocket.send_json({"type": "error", "message": message})
		# tells the browser to release its microphone
		await websocket.send_json({"type": "closed", "transcript": panel.transcript})
		await websocket.close()
	except (WebSocketDisconnect, RuntimeError):
		logger.debug("Transcription socket for shell %s already gone", shell_id)
