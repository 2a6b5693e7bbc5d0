from __future__ import annotations
from typing import Any, Dict, List, Optional

from ..decoder import decode_references
from ..models import ChatMessage, Location
from .base import ERROR, Panel

APOLOGY = "Sorry, I encountered an error. Please try again."


def append_sources(text: str, refs) -> str:
	links = [f"[{r.title or 'View on Map'}]({r.uri})" for r in refs if r.kind == "maps"]
	if not links:
		return text
	return text + "\n\n**Sources:**\n" + "\n".join(links)


class ChatPanel(Panel):
	"""The floating chatbot. Mounted next to whichever panel is shown."""

	view = "chat"

	def __init__(self, client_factory=None) -> None:
		super().__init__(client_factory)
		self.is_open = False
		self.use_maps = False
		self.messages: List[ChatMessage] = []
		# what the conversation model has seen: successful non-maps turns only
		self.history: List[ChatMessage] = []

	def toggle(self) -> bool:
		self.is_open = not self.is_open
		return self.is_open

	async def send(self, text: str, *, use_maps: Optional[bool] = None, location: Optional[Location] = None) -> bool:
		if use_maps is not None:
			self.use_maps = use_maps
		if not text.strip():
			return self.reject("Type a message first.")
		question = ChatMessage(role="user", content=text)
		self.messages = [*self.messages, question]
		history = [*self.history, question]
		maps = self.use_maps

		async def action(client):
			if maps:
				grounded = await client.generate_grounded(text, tool="maps", location=location)
				return append_sources(grounded.text, decode_references(grounded.chunks))
			return await client.chat(history)

		ok = await self.run(action)
		if ok:
			reply = ChatMessage(role="model", content=self.result)
			self.messages = [*self.messages, reply]
			if not maps:
				self.history = [*history, reply]
		elif self.status == ERROR:
			self.messages = [*self.messages, ChatMessage(role="model", content=APOLOGY)]
		return ok

	def clear(self) -> None:
		self.messages = []
		self.history = []
		self.result = None

	def snapshot(self) -> Dict[str, Any]:
		data = super().snapshot()
		data.update(
			is_open=self.is_open,
			use_maps=self.use_maps,
			messages=[m.model_dump() for m in self.messages],
		)
		return data
