from __future__ import annotations
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Optional, Set

from ..errors import AcademiaError, UNKNOWN_ERROR_MESSAGE
from ..gemini_client import GeminiClient

logger = logging.getLogger(__name__)

IDLE = "idle"
IN_FLIGHT = "in_flight"
SUCCESS = "success"
ERROR = "error"

ClientFactory = Callable[[], GeminiClient]
Action = Callable[[GeminiClient], Awaitable[Any]]


class Panel:
	"""Request/response state for one mounted panel.

	Every generation goes through ``run``: the previous result and error are
	cleared, the action gets a fresh client, and the outcome is written back
	only if no newer request was issued meanwhile. Errors stop here as a
	display string.
	"""

	view = ""

	def __init__(self, client_factory: Optional[ClientFactory] = None) -> None:
		self.client_factory: ClientFactory = client_factory or GeminiClient
		self.status = IDLE
		self.error = ""
		self.input_error = ""
		self.result: Any = None
		self.mounted = True
		self._seq = 0
		self._tasks: Set[asyncio.Task] = set()

	@property
	def loading(self) -> bool:
		return self.status == IN_FLIGHT

	@property
	def sequence(self) -> int:
		return self._seq

	def reject(self, message: str) -> bool:
		"""Record a missing-input message without contacting the backend."""
		self.input_error = message
		return False

	def on_reset(self) -> None:
		"""Hook for per-panel view state that goes with the result."""

	def invalidate(self) -> int:
		"""Make every request issued so far stale."""
		self._seq += 1
		return self._seq

	def _begin(self) -> int:
		seq = self.invalidate()
		self.status = IN_FLIGHT
		self.error = ""
		self.input_error = ""
		self.result = None
		self.on_reset()
		return seq

	async def run(self, action: Action) -> bool:
		return await self._complete(self._begin(), action)

	def start(self, action: Action) -> asyncio.Task:
		"""Like ``run``, but returns once the panel is in flight.

		The request goes on as a panel-owned task, so teardown cancels it.
		"""
		return self.spawn(self._complete(self._begin(), action))

	async def _complete(self, seq: int, action: Action) -> bool:
		client: Optional[GeminiClient] = None
		try:
			client = self.client_factory()
			result = await action(client)
		except AcademiaError as err:
			return self._fail(seq, err.message)
		except Exception as err:
			logger.exception("%s panel action failed", self.view)
			return self._fail(seq, str(err) or UNKNOWN_ERROR_MESSAGE)
		finally:
			if client is not None:
				await client.aclose()
		if seq != self._seq:
			logger.info("Discarding stale %s response (request %d, latest %d)", self.view, seq, self._seq)
			return False
		self.result = result
		self.status = SUCCESS
		return True

	def _fail(self, seq: int, message: str) -> bool:
		if seq != self._seq:
			logger.info("Discarding stale %s error (request %d, latest %d)", self.view, seq, self._seq)
			return False
		self.status = ERROR
		self.error = message
		self.result = None
		self.on_reset()
		return False

	def spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
		task = asyncio.ensure_future(coro)
		self._tasks.add(task)
		task.add_done_callback(self._tasks.discard)
		return task

	async def on_mount(self) -> None:
		pass

	async def teardown(self) -> None:
		self.mounted = False
		# anything still in flight now lands as stale
		self.invalidate()
		tasks = list(self._tasks)
		for task in tasks:
			task.cancel()
		if tasks:
			await asyncio.gather(*tasks, return_exceptions=True)
		self._tasks.clear()

	def snapshot(self) -> Dict[str, Any]:
		return {
			"view": self.view,
			"status": self.status,
			"loading": self.loading,
			"error": self.error,
			"input_error": self.input_error,
			"sequence": self._seq,
		}
