from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..errors import GatewayError
from ..models import ProgressData
from ..prompts import progress_request
from .base import Action, Panel

logger = logging.getLogger(__name__)

PROGRESS_UNAVAILABLE = "Could not load progress report. Please try again later."

UPCOMING_TASKS: List[str] = [
	"Math Homework (Due Tomorrow)",
	"History Essay (Due Friday)",
	"Lab Report (Due next Monday)",
]


class DashboardPanel(Panel):
	view = "dashboard"

	def __init__(self, client_factory=None, progress: Optional[ProgressData] = None) -> None:
		super().__init__(client_factory)
		self.progress = progress or ProgressData()
		self.refresh_task: Optional[asyncio.Task] = None

	async def on_mount(self) -> None:
		# mounting returns while the report is still loading
		self.refresh_task = self.start(self._report_action())

	async def refresh(self, progress: Optional[ProgressData] = None) -> bool:
		if progress is not None:
			self.progress = progress
		return await self.run(self._report_action())

	def _report_action(self) -> Action:
		request = progress_request(self.progress)

		async def action(client):
			try:
				return await client.generate(request.prompt)
			except Exception as err:
				# the card shows a friendly line instead of the raw failure
				logger.warning("Progress report failed: %s", err)
				raise GatewayError(PROGRESS_UNAVAILABLE) from err

		return action

	@property
	def report(self) -> str:
		return self.result or ""

	def snapshot(self) -> Dict[str, Any]:
		data = super().snapshot()
		data.update(
			progress=self.progress.model_dump(),
			report=self.report,
			upcoming_tasks=list(UPCOMING_TASKS),
		)
		return data
