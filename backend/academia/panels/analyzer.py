from __future__ import annotations
from typing import Any, Dict, Optional

from ..prompts import format_request
from .base import IDLE, Panel

DEFAULT_PROMPT = "Explain what is in this image."


class AnalyzerPanel(Panel):
	view = "analyzer"

	def __init__(self, client_factory=None) -> None:
		super().__init__(client_factory)
		self.image: Optional[bytes] = None
		self.mime_type = ""
		self.filename = ""
		self.prompt = DEFAULT_PROMPT

	def select_image(self, data: bytes, mime_type: str, filename: str = "") -> None:
		if not mime_type.startswith("image/"):
			raise ValueError("only image files can be analyzed")
		# an analysis still in flight belongs to the old picture
		self.invalidate()
		self.image = data
		self.mime_type = mime_type
		self.filename = filename
		self.result = None
		self.error = ""
		self.input_error = ""
		self.status = IDLE

	@property
	def analysis(self) -> str:
		return self.result or ""

	async def analyze(self, prompt: Optional[str] = None) -> bool:
		if prompt is not None:
			self.prompt = prompt
		if not self.image:
			return self.reject("Select an image first.")
		request = format_request("analyze_image", self.prompt or DEFAULT_PROMPT)
		image, mime_type = self.image, self.mime_type

		async def action(client):
			return await client.analyze_image(image, mime_type, request.prompt)

		return await self.run(action)

	def snapshot(self) -> Dict[str, Any]:
		data = super().snapshot()
		data.update(
			has_image=self.image is not None,
			filename=self.filename,
			mime_type=self.mime_type,
			prompt=self.prompt,
			analysis=self.analysis,
		)
		return data
