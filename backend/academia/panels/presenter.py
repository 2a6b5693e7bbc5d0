from __future__ import annotations
from typing import Any, Dict, List, Optional

from ..decoder import decode_structured
from ..models import Slide
from ..prompts import format_request
from .base import Panel

SLIDES_ERROR = "Could not generate slides. The AI returned an invalid format."


class PresenterPanel(Panel):
	view = "presenter"

	def __init__(self, client_factory=None) -> None:
		super().__init__(client_factory)
		self.topic = ""
		self.current_slide = 0

	def on_reset(self) -> None:
		self.current_slide = 0

	@property
	def slides(self) -> List[Slide]:
		return self.result or []

	async def generate(self, topic: Optional[str] = None) -> bool:
		if topic is not None:
			self.topic = topic
		if not self.topic.strip():
			return self.reject("Enter a topic or paste an essay first.")
		request = format_request("slides", self.topic)

		async def action(client):
			raw = await client.generate_structured(request.prompt, request.shape)
			return [Slide.model_validate(s) for s in decode_structured(raw, request.shape, message=SLIDES_ERROR)]

		return await self.run(action)

	@property
	def can_go_previous(self) -> bool:
		return self.current_slide > 0

	@property
	def can_go_next(self) -> bool:
		return self.current_slide < len(self.slides) - 1

	def previous(self) -> int:
		self.current_slide = max(0, self.current_slide - 1)
		return self.current_slide

	def next(self) -> int:
		self.current_slide = max(0, min(len(self.slides) - 1, self.current_slide + 1))
		return self.current_slide

	def snapshot(self) -> Dict[str, Any]:
		data = super().snapshot()
		slides = self.slides
		data.update(
			topic=self.topic,
			slides=[s.model_dump() for s in slides],
			current_slide=self.current_slide,
			slide=slides[self.current_slide].model_dump() if slides else None,
			position=f"Slide {self.current_slide + 1} of {len(slides)}" if slides else "",
			can_go_previous=self.can_go_previous,
			can_go_next=self.can_go_next,
		)
		return data
