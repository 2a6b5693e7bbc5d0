from __future__ import annotations
import asyncio
import logging
from typing import Any, Dict, List, Optional

from ..decoder import decode_structured
from ..models import Flashcard, QuizQuestion
from ..prompts import exam_request, format_request, quiz_request
from ..settings import settings
from .base import Panel

logger = logging.getLogger(__name__)

STUDIER_MODES = ("flashcards", "quiz", "exam")

FLASHCARDS_ERROR = "Could not generate flashcards. The AI returned an invalid format."
QUIZ_ERROR = "Could not generate a quiz. The AI returned an invalid format."


def format_time(seconds: int) -> str:
	minutes, secs = divmod(max(0, int(seconds)), 60)
	return f"{minutes}:{secs:02d}"


class StudierPanel(Panel):
	"""Flashcards, practice quizzes and a timed exam simulator.

	An exam gets ``exam_seconds_per_question`` per question. The countdown
	runs as a panel-owned task; when it reaches zero the exam is submitted
	with whatever answers were recorded.
	"""

	view = "studier"

	def __init__(self, client_factory=None, *, tick_interval: float = 1.0) -> None:
		super().__init__(client_factory)
		self.mode = "flashcards"
		self.notes = ""
		self.exam_topic = ""
		self.generated_mode = ""
		self.current_card = 0
		self.flipped = False
		self.answers: Dict[int, str] = {}
		self.show_results = False
		self.timer = 0
		self.tick_interval = tick_interval
		self._timer_task: Optional[asyncio.Task] = None

	def on_reset(self) -> None:
		self._stop_timer()
		self.generated_mode = ""
		self.current_card = 0
		self.flipped = False
		self.answers = {}
		self.show_results = False
		self.timer = 0

	def set_mode(self, mode: str) -> None:
		if mode not in STUDIER_MODES:
			raise ValueError(f"mode must be one of {STUDIER_MODES}")
		if mode == self.mode:
			return
		self.mode = mode
		if self._exam_running():
			self._start_timer()
		else:
			self._stop_timer()

	@property
	def flashcards(self) -> List[Flashcard]:
		return self.result if self.generated_mode == "flashcards" and self.result else []

	@property
	def quiz(self) -> List[QuizQuestion]:
		return self.result if self.generated_mode in ("quiz", "exam") and self.result else []

	async def generate(
		self,
		*,
		mode: Optional[str] = None,
		notes: Optional[str] = None,
		exam_topic: Optional[str] = None,
	) -> bool:
		if mode is not None:
			self.set_mode(mode)
		if notes is not None:
			self.notes = notes
		if exam_topic is not None:
			self.exam_topic = exam_topic
		if self.mode == "exam" and not self.exam_topic.strip():
			return self.reject("Enter an exam topic first.")
		if self.mode != "exam" and not self.notes.strip():
			return self.reject("Paste your notes first.")

		mode_now = self.mode
		if mode_now == "flashcards":
			request = format_request("flashcards", self.notes)
		elif mode_now == "quiz":
			request = quiz_request(self.notes)
		else:
			request = exam_request(self.exam_topic)

		async def action(client):
			raw = await client.generate_structured(request.prompt, request.shape)
			if mode_now == "flashcards":
				return [Flashcard.model_validate(c) for c in decode_structured(raw, request.shape, message=FLASHCARDS_ERROR)]
			return [QuizQuestion.model_validate(q) for q in decode_structured(raw, request.shape, message=QUIZ_ERROR)]

		ok = await self.run(action)
		if ok:
			self.generated_mode = mode_now
			if self._exam_running():
				self._start_timer()
		return ok

	# --- flashcards ---

	@property
	def can_go_previous(self) -> bool:
		return self.current_card > 0

	@property
	def can_go_next(self) -> bool:
		return self.current_card < len(self.flashcards) - 1

	def flip(self) -> bool:
		self.flipped = not self.flipped
		return self.flipped

	def previous_card(self) -> int:
		self.current_card = max(0, self.current_card - 1)
		self.flipped = False
		return self.current_card

	def next_card(self) -> int:
		self.current_card = max(0, min(len(self.flashcards) - 1, self.current_card + 1))
		self.flipped = False
		return self.current_card

	# --- quiz / exam ---

	def answer(self, index: int, option: str) -> None:
		quiz = self.quiz
		if not 0 <= index < len(quiz):
			raise IndexError(f"question {index} does not exist")
		if option not in quiz[index].options:
			raise ValueError(f"{option!r} is not an option of question {index}")
		if self.show_results:
			return
		self.answers[index] = option

	@property
	def score(self) -> int:
		return sum(1 for i, q in enumerate(self.quiz) if self.answers.get(i) == q.correctAnswer)

	@property
	def score_text(self) -> str:
		return f"{self.score} out of {len(self.quiz)}"

	def submit(self) -> int:
		self._stop_timer()
		self.show_results = True
		return self.score

	def retry(self) -> None:
		"""Try Again / Take New Exam: drop the quiz and its answers."""
		self._stop_timer()
		self.show_results = False
		self.answers = {}
		self.result = None
		self.generated_mode = ""
		self.timer = 0

	def tick(self) -> int:
		"""Advance the countdown by one second; submits at zero."""
		if not self._exam_running():
			return self.timer
		self.timer = max(0, self.timer - 1)
		if self.timer == 0:
			logger.info("Exam time is up; submitting %d recorded answers", len(self.answers))
			self.submit()
		return self.timer

	def _exam_running(self) -> bool:
		return self.mode == "exam" and self.generated_mode == "exam" and bool(self.quiz) and not self.show_results

	def _start_timer(self) -> None:
		self._stop_timer()
		self.timer = len(self.quiz) * settings.exam_seconds_per_question
		self._timer_task = self.spawn(self._countdown())

	def _stop_timer(self) -> None:
		task = self._timer_task
		self._timer_task = None
		if task is not None and task is not asyncio.current_task():
			task.cancel()

	async def _countdown(self) -> None:
		while self._exam_running():
			await asyncio.sleep(self.tick_interval)
			self.tick()

	def snapshot(self) -> Dict[str, Any]:
		data = super().snapshot()
		cards = self.flashcards
		quiz = self.quiz
		data.update(
			mode=self.mode,
			notes=self.notes,
			exam_topic=self.exam_topic,
			flashcards=[c.model_dump() for c in cards],
			current_card=self.current_card,
			card=cards[self.current_card].model_dump() if cards else None,
			flipped=self.flipped,
			card_position=f"Card {self.current_card + 1} of {len(cards)}" if cards else "",
			can_go_previous=self.can_go_previous,
			can_go_next=self.can_go_next,
			quiz=[q.model_dump() for q in quiz],
			answers={str(i): a for i, a in self.answers.items()},
			show_results=self.show_results,
			score=self.score if self.show_results else None,
			score_text=self.score_text if self.show_results and quiz else "",
			timer=self.timer,
			timer_text=format_time(self.timer) if self.generated_mode == "exam" else "",
		)
		return data
