from __future__ import annotations
import logging
import uuid
from typing import Any, Dict, Optional

from .panels import PANELS, VIEWS, ChatPanel, Panel
from .panels.base import ClientFactory

logger = logging.getLogger(__name__)

DEFAULT_VIEW = "dashboard"


class Shell:
	"""Which panel is mounted, plus the chatbot that is always there.

	Navigating tears the old panel down and mounts a fresh one, so no panel
	state survives leaving it.
	"""

	def __init__(self, shell_id: str, client_factory: Optional[ClientFactory] = None) -> None:
		self.shell_id = shell_id
		self.client_factory = client_factory
		self.current_view = ""
		self.panel: Optional[Panel] = None
		self.chat = ChatPanel(client_factory)

	async def navigate(self, view: str) -> Panel:
		if view not in PANELS:
			raise ValueError(f"view must be one of {VIEWS}")
		if self.panel is not None:
			await self.panel.teardown()
		self.current_view = view
		self.panel = PANELS[view](self.client_factory)
		logger.debug("Shell %s mounted %s", self.shell_id, view)
		await self.panel.on_mount()
		return self.panel

	async def close(self) -> None:
		if self.panel is not None:
			await self.panel.teardown()
			self.panel = None
		await self.chat.teardown()

	def snapshot(self) -> Dict[str, Any]:
		return {
			"shell_id": self.shell_id,
			"views": list(VIEWS),
			"current_view": self.current_view,
			"panel": self.panel.snapshot() if self.panel else None,
			"chat": self.chat.snapshot(),
		}


# In-process only; every shell is lost on restart.
_shells: Dict[str, Shell] = {}


async def create_shell(client_factory: Optional[ClientFactory] = None, view: str = DEFAULT_VIEW) -> Shell:
	shell = Shell(uuid.uuid4().hex, client_factory)
	_shells[shell.shell_id] = shell
	await shell.navigate(view)
	return shell


def get_shell(shell_id: str) -> Optional[Shell]:
	return _shells.get(shell_id)


async def close_shell(shell_id: str) -> bool:
	shell = _shells.pop(shell_id, None)
	if shell is None:
		return False
	await shell.close()
	return True


async def close_all() -> None:
	for shell_id in list(_shells):
		await close_shell(shell_id)
