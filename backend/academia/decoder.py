from __future__ import annotations
import base64
import binascii
import json
import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from .errors import DecodeError
from .gemini_client import InlineMedia
from .models import GroundingReference
from .schemas import Shape, ShapeMismatch

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "The AI returned an invalid format."

_FENCE = re.compile(r"^```(?:json)?\s*([\s\S]*?)\s*```$")


def _strip_fence(text: str) -> str:
	stripped = text.strip()
	match = _FENCE.match(stripped)
	if match:
		return match.group(1)
	return stripped


def decode_structured(raw: str, shape: Shape, *, message: str = INVALID_FORMAT_MESSAGE) -> Any:
	"""Parse ``raw`` as JSON and check it against ``shape``.

	Returns the parsed value untouched. Raises ``DecodeError(message)`` if the
	text is not JSON or a required field is missing; nothing partial is returned.
	"""
	try:
		value = json.loads(_strip_fence(raw or ""))
	except ValueError as err:
		logger.warning("Failed to parse JSON: %s", err)
		raise DecodeError(message) from err
	try:
		shape.validate(value)
	except ShapeMismatch as err:
		logger.warning("Response does not match the requested shape: %s", err)
		raise DecodeError(message) from err
	return value


def decode_media(media: InlineMedia, *, message: str = "No media data received.") -> bytes:
	if not media.data:
		raise DecodeError(message)
	try:
		return base64.b64decode(media.data, validate=True)
	except (binascii.Error, ValueError) as err:
		raise DecodeError(message) from err


def decode_references(chunks: Optional[Iterable[Dict[str, Any]]]) -> List[GroundingReference]:
	"""Grounding chunks to references; ``None`` or empty means no sources."""
	refs: List[GroundingReference] = []
	for chunk in chunks or []:
		if not isinstance(chunk, dict):
			continue
		for kind in ("web", "maps"):
			source = chunk.get(kind)
			if isinstance(source, dict) and source.get("uri"):
				refs.append(GroundingReference(kind=kind, uri=source["uri"], title=source.get("title") or None))
	return refs


def data_url(mime_type: str, data: bytes) -> str:
	return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"
