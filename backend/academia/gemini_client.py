from __future__ import annotations
import base64
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

import httpx

from .errors import GatewayError
from .live import TranscriptionSession, connect_genai
from .models import ChatMessage, Location
from .schemas import Shape
from .settings import settings

logger = logging.getLogger(__name__)

ASPECT_RATIOS = ("1:1", "16:9", "9:16", "4:3", "3:4")
GROUNDING_TOOLS = ("search", "maps")


@dataclass
class GroundedText:
	text: str
	chunks: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class InlineMedia:
	mime_type: str
	data: str  # base64, exactly as received
	sample_rate: Optional[int] = None


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		transport: Optional[httpx.AsyncBaseTransport] = None,
		live_connect: Optional[Callable[..., Any]] = None,
	) -> None:
		self.api_key = api_key or settings.gemini_api_key
		if not self.api_key:
			raise GatewayError("GEMINI_API_KEY is not configured")
		self.model = model or settings.gemini_model
		self.base_url = (base_url or settings.gemini_base_url).rstrip("/")
		timeout = settings.request_timeout or None
		self._client = httpx.AsyncClient(timeout=timeout, transport=transport)
		self._live_connect = live_connect or connect_genai

	# --- text ---------------------------------------------------------------

	async def generate(self, prompt: str, *, model: Optional[str] = None, thinking_budget: Optional[int] = None) -> str:
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		if thinking_budget is not None:
			payload["generationConfig"] = {"thinkingConfig": {"thinkingBudget": int(thinking_budget)}}
		data = await self._post(model or self.model, "generateContent", payload)
		return _candidate_text(data)

	async def generate_structured(self, prompt: str, shape: Shape, *, model: Optional[str] = None) -> str:
		"""Ask for JSON constrained to ``shape``; the text comes back unparsed."""
		payload: Dict[str, Any] = {
			"contents": [{"parts": [{"text": prompt}]}],
			"generationConfig": {
				"responseMimeType": "application/json",
				"responseSchema": shape.to_schema(),
			},
		}
		data = await self._post(model or self.model, "generateContent", payload)
		return _candidate_text(data)

	async def generate_grounded(
		self,
		prompt: str,
		*,
		tool: str = "search",
		location: Optional[Location] = None,
		model: Optional[str] = None,
	) -> GroundedText:
		if tool not in GROUNDING_TOOLS:
			raise ValueError(f"tool must be one of {GROUNDING_TOOLS}")
		payload: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
		if tool == "search":
			payload["tools"] = [{"googleSearch": {}}]
		else:
			payload["tools"] = [{"googleMaps": {}}]
			if location is not None:
				payload["toolConfig"] = {
					"retrievalConfig": {"latLng": {"latitude": location.latitude, "longitude": location.longitude}}
				}
		data = await self._post(model or self.model, "generateContent", payload)
		candidate = _first_candidate(data)
		chunks = (candidate.get("groundingMetadata") or {}).get("groundingChunks") or []
		return GroundedText(text=_candidate_text(data), chunks=list(chunks))

	async def generate_multimodal(
		self,
		parts: List[Dict[str, Any]],
		*,
		role: str = "user",
		model: Optional[str] = None,
	) -> str:
		payload: Dict[str, Any] = {"contents": [{"role": role, "parts": parts}]}
		data = await self._post(model or self.model, "generateContent", payload)
		return _candidate_text(data)

	async def analyze_image(self, image: bytes, mime_type: str, prompt: str) -> str:
		parts = [
			{"inlineData": {"mimeType": mime_type, "data": base64.b64encode(image).decode("ascii")}},
			{"text": prompt},
		]
		return await self.generate_multimodal(parts)

	async def chat(self, history: List[ChatMessage], *, model: Optional[str] = None) -> str:
		"""Send the whole conversation and return the next model turn."""
		contents = [{"role": m.role, "parts": [{"text": m.content}]} for m in history]
		data = await self._post(model or self.model, "generateContent", {"contents": contents})
		return _candidate_text(data)

	# --- media --------------------------------------------------------------

	async def generate_image(self, prompt: str, aspect_ratio: str, *, model: Optional[str] = None) -> InlineMedia:
		if aspect_ratio not in ASPECT_RATIOS:
			raise ValueError(f"aspect_ratio must be one of {ASPECT_RATIOS}")
		payload: Dict[str, Any] = {
			"instances": [{"prompt": prompt}],
			"parameters": {
				"sampleCount": 1,
				"aspectRatio": aspect_ratio,
				"outputOptions": {"mimeType": "image/jpeg"},
			},
		}
		data = await self._post(model or settings.image_model, "predict", payload)
		predictions = data.get("predictions") or [{}]
		first = predictions[0] if isinstance(predictions[0], dict) else {}
		return InlineMedia(
			mime_type=first.get("mimeType") or "image/jpeg",
			data=first.get("bytesBase64Encoded") or "",
		)

	async def generate_speech(self, text: str, *, voice: Optional[str] = None, model: Optional[str] = None) -> InlineMedia:
		payload: Dict[str, Any] = {
			"contents": [{"parts": [{"text": text}]}],
			"generationConfig": {
				"responseModalities": ["AUDIO"],
				"speechConfig": {
					"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice or settings.tts_voice}},
				},
			},
		}
		data = await self._post(model or settings.tts_model, "generateContent", payload)
		parts = (_first_candidate(data).get("content") or {}).get("parts") or [{}]
		inline = parts[0].get("inlineData") or {}
		return InlineMedia(
			mime_type=inline.get("mimeType") or f"audio/L16;rate={settings.tts_sample_rate}",
			data=inline.get("data") or "",
			sample_rate=settings.tts_sample_rate,
		)

	def open_transcription(self, *, model: Optional[str] = None) -> TranscriptionSession:
		"""Create (not yet open) a live transcription session; use it with ``async with``."""
		live_model = model or settings.live_model
		return TranscriptionSession(
			lambda: self._live_connect(self.api_key, live_model),
			sample_rate=settings.live_sample_rate,
		)

	# --- transport ----------------------------------------------------------

	async def _post(self, model: str, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
		url = f"{self.base_url}/models/{model}:{method}"
		logger.debug("Gemini %s on %s", method, model)
		try:
			r = await self._client.post(url, params={"key": self.api_key}, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			message = _service_error_message(http_err.response)
			logger.warning("Gemini %s on %s failed with %s: %s", method, model, http_err.response.status_code, message)
			raise GatewayError(message) from http_err
		except httpx.RequestError as net_err:
			logger.warning("Gemini %s on %s failed: %s", method, model, net_err)
			raise GatewayError(f"Could not reach Gemini: {net_err}") from net_err
		try:
			data = r.json()
		except ValueError as err:
			raise GatewayError(f"Unexpected Gemini response: {r.text[:200]}") from err
		if not isinstance(data, dict):
			raise GatewayError(f"Unexpected Gemini response: {r.text[:200]}")
		return data

	async def aclose(self) -> None:
		await self._client.aclose()


def _service_error_message(response: httpx.Response) -> str:
	try:
		detail = response.json()["error"]["message"]
	except Exception:
		detail = response.text[:200] or response.reason_phrase
	return f"Gemini request failed ({response.status_code}): {detail}"


def _first_candidate(data: Dict[str, Any]) -> Dict[str, Any]:
	candidates = data.get("candidates") or []
	if not candidates or not isinstance(candidates[0], dict):
		feedback = data.get("promptFeedback") or {}
		reason = feedback.get("blockReason")
		if reason:
			raise GatewayError(f"Gemini blocked the prompt: {reason}")
		raise GatewayError("Unexpected Gemini response: no candidates")
	return candidates[0]


def _candidate_text(data: Dict[str, Any]) -> str:
	parts = (_first_candidate(data).get("content") or {}).get("parts") or []
	texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
	if not texts:
		raise GatewayError("Unexpected Gemini response: no text in candidate")
	return "".join(texts)
