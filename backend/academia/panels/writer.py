from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..decoder import decode_references
from ..models import GroundingReference
from ..prompts import format_request
from ..settings import settings
from .base import Panel

WRITER_MODES = ("write", "enhance", "explain", "cite", "research", "plagiarism")
ENGINES = ("fast", "balanced", "complex")

# modes that read the long-text box instead of the prompt box
TEXT_MODES = ("enhance", "plagiarism")
GROUNDED_MODES = ("research", "plagiarism")
# modes that always run on the balanced engine
FIXED_ENGINE_MODES = ("research", "plagiarism", "explain")

MODE_CONFIG: Dict[str, Dict[str, str]] = {
	"write": {
		"title": "Essay Generator",
		"placeholder": "e.g., Write a 500-word essay about the causes of the American Revolution.",
		"action": "Generate",
	},
	"enhance": {
		"title": "Grammar & Style Enhancer",
		"placeholder": "Paste your text here to improve its clarity, tone, and readability.",
		"action": "Enhance",
	},
	"cite": {
		"title": "Smart Citation Generator",
		"placeholder": "e.g., Generate an APA citation for the book \"Sapiens: A Brief History of Humankind\" by Yuval Noah Harari.",
		"action": "Cite",
	},
	"research": {
		"title": "AI Research Assistant",
		"placeholder": "e.g., Who won the most medals at the 2024 Paris Olympics?",
		"action": "Research",
	},
	"explain": {
		"title": "Topic Explainer",
		"placeholder": "e.g., Explain the concept of black holes in simple terms.",
		"action": "Explain",
	},
	"plagiarism": {
		"title": "Plagiarism Checker",
		"placeholder": "Paste text here to check for potential plagiarism and find similar content online.",
		"action": "Check",
	},
}


@dataclass
class WriterResult:
	text: str
	sources: List[GroundingReference] = field(default_factory=list)


class WriterPanel(Panel):
	view = "writer"

	def __init__(self, client_factory=None) -> None:
		super().__init__(client_factory)
		self.mode = "write"
		self.engine = "balanced"
		self.prompt = ""
		self.text = ""

	def set_mode(self, mode: str) -> None:
		if mode not in WRITER_MODES:
			raise ValueError(f"mode must be one of {WRITER_MODES}")
		self.mode = mode

	def set_engine(self, engine: str) -> None:
		if engine not in ENGINES:
			raise ValueError(f"engine must be one of {ENGINES}")
		self.engine = engine

	@property
	def engine_locked(self) -> bool:
		return self.mode in FIXED_ENGINE_MODES

	@property
	def current_input(self) -> str:
		return self.text if self.mode in TEXT_MODES else self.prompt

	async def generate(
		self,
		*,
		mode: Optional[str] = None,
		engine: Optional[str] = None,
		prompt: Optional[str] = None,
		text: Optional[str] = None,
	) -> bool:
		if mode is not None:
			self.set_mode(mode)
		if engine is not None:
			self.set_engine(engine)
		if prompt is not None:
			self.prompt = prompt
		if text is not None:
			self.text = text

		user_input = self.current_input
		if not user_input.strip():
			box = "text" if self.mode in TEXT_MODES else "prompt"
			return self.reject(f"Enter a {box} to {MODE_CONFIG[self.mode]['action'].lower()}.")

		request = format_request(self.mode, user_input)
		current_mode = self.mode
		current_engine = "balanced" if self.engine_locked else self.engine

		async def action(client):
			if current_mode in GROUNDED_MODES:
				grounded = await client.generate_grounded(request.prompt, tool="search")
				return WriterResult(text=grounded.text, sources=decode_references(grounded.chunks))
			if current_mode == "write" and current_engine == "complex":
				text = await client.generate(request.prompt, model=settings.gemini_model_pro, thinking_budget=settings.thinking_budget)
			elif current_mode == "write" and current_engine == "fast":
				text = await client.generate(request.prompt, model=settings.gemini_model_lite)
			else:
				text = await client.generate(request.prompt)
			return WriterResult(text=text)

		return await self.run(action)

	def snapshot(self) -> Dict[str, Any]:
		data = super().snapshot()
		result: Optional[WriterResult] = self.result
		data.update(
			mode=self.mode,
			engine=self.engine,
			engine_locked=self.engine_locked,
			config=MODE_CONFIG[self.mode],
			prompt=self.prompt,
			text=self.text,
			result=result.text if result else "",
			sources=[s.model_dump() for s in result.sources] if result else [],
		)
		return data
