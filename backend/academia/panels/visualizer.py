from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..decoder import data_url, decode_media
from ..gemini_client import ASPECT_RATIOS
from ..prompts import format_request
from .base import Panel

VISUALIZER_MODES = ("image", "conceptMap")


@dataclass
class GeneratedImage:
	mime_type: str
	data: bytes

	@property
	def url(self) -> str:
		return data_url(self.mime_type, self.data)


class VisualizerPanel(Panel):
	view = "visualizer"

	def __init__(self, client_factory=None) -> None:
		super().__init__(client_factory)
		self.mode = "image"
		self.prompt = ""
		self.aspect_ratio = "16:9"

	def set_mode(self, mode: str) -> None:
		if mode not in VISUALIZER_MODES:
			raise ValueError(f"mode must be one of {VISUALIZER_MODES}")
		self.mode = mode

	def set_aspect_ratio(self, aspect_ratio: str) -> None:
		if aspect_ratio not in ASPECT_RATIOS:
			raise ValueError(f"aspect_ratio must be one of {ASPECT_RATIOS}")
		self.aspect_ratio = aspect_ratio

	@property
	def image(self) -> Optional[GeneratedImage]:
		return self.result if isinstance(self.result, GeneratedImage) else None

	@property
	def concept_map(self) -> str:
		return self.result if isinstance(self.result, str) else ""

	async def generate(
		self,
		*,
		mode: Optional[str] = None,
		prompt: Optional[str] = None,
		aspect_ratio: Optional[str] = None,
	) -> bool:
		if mode is not None:
			self.set_mode(mode)
		if aspect_ratio is not None:
			self.set_aspect_ratio(aspect_ratio)
		if prompt is not None:
			self.prompt = prompt
		if not self.prompt.strip():
			return self.reject("Describe what to visualize first.")

		if self.mode == "image":
			request = format_request("image", self.prompt)
			ratio = self.aspect_ratio

			async def action(client):
				media = await client.generate_image(request.prompt, ratio, model=request.model)
				return GeneratedImage(mime_type=media.mime_type, data=decode_media(media, message="No image data received."))
		else:
			request = format_request("concept_map", self.prompt)

			async def action(client):
				return await client.generate(request.prompt)

		return await self.run(action)

	def snapshot(self) -> Dict[str, Any]:
		data = super().snapshot()
		image = self.image
		data.update(
			mode=self.mode,
			prompt=self.prompt,
			aspect_ratio=self.aspect_ratio,
			image_url=image.url if image else "",
			concept_map=self.concept_map,
		)
		return data
