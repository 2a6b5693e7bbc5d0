from __future__ import annotations
from typing import Any, Dict, List, Optional

from ..decoder import decode_structured
from ..models import StudyPlan, Task
from ..prompts import study_plan_request
from .base import Panel

PLANNER_MODES = ("tasks", "studyPlan")
MAX_PLAN_DAYS = 30

STUDY_PLAN_ERROR = "Could not generate a study plan. The AI returned an invalid format."


def _seed_tasks() -> List[Task]:
	return [
		Task(id=1, title="Complete Chapter 5 Math exercises", dueDate="2024-09-15", completed=False),
		Task(id=2, title="Draft History essay on Roman Empire", dueDate="2024-09-18", completed=False),
		Task(id=3, title="Study for Chemistry midterm", dueDate="2024-09-22", completed=True),
	]


class PlannerPanel(Panel):
	view = "planner"

	def __init__(self, client_factory=None) -> None:
		super().__init__(client_factory)
		self.mode = "tasks"
		self.tasks: List[Task] = _seed_tasks()
		self.plan_topic = ""
		self.plan_days = 7

	def set_mode(self, mode: str) -> None:
		if mode not in PLANNER_MODES:
			raise ValueError(f"mode must be one of {PLANNER_MODES}")
		self.mode = mode

	# Task list is local only; no backend involved.

	def add_task(self, title: str, due_date: str) -> Optional[Task]:
		if not title.strip() or not due_date.strip():
			self.reject("A task needs a title and a due date.")
			return None
		self.input_error = ""
		task = Task(id=max((t.id for t in self.tasks), default=0) + 1, title=title.strip(), dueDate=due_date.strip())
		self.tasks = [*self.tasks, task]
		return task

	def toggle_task(self, task_id: int) -> Task:
		for i, task in enumerate(self.tasks):
			if task.id == task_id:
				updated = task.model_copy(update={"completed": not task.completed})
				self.tasks = [*self.tasks[:i], updated, *self.tasks[i + 1:]]
				return updated
		raise KeyError(task_id)

	def delete_task(self, task_id: int) -> None:
		if not any(t.id == task_id for t in self.tasks):
			raise KeyError(task_id)
		self.tasks = [t for t in self.tasks if t.id != task_id]

	# Study plan

	@property
	def study_plan(self) -> Optional[StudyPlan]:
		return self.result

	async def generate_plan(self, topic: Optional[str] = None, days: Optional[int] = None) -> bool:
		if topic is not None:
			self.plan_topic = topic
		if days is not None:
			self.plan_days = days
		if not self.plan_topic.strip():
			return self.reject("Enter a study topic first.")
		if not 1 <= self.plan_days <= MAX_PLAN_DAYS:
			return self.reject(f"A study plan must last between 1 and {MAX_PLAN_DAYS} days.")
		request = study_plan_request(self.plan_topic, self.plan_days)

		async def action(client):
			raw = await client.generate_structured(request.prompt, request.shape, model=request.model)
			return StudyPlan.model_validate(decode_structured(raw, request.shape, message=STUDY_PLAN_ERROR))

		return await self.run(action)

	def snapshot(self) -> Dict[str, Any]:
		data = super().snapshot()
		plan = self.study_plan
		data.update(
			mode=self.mode,
			tasks=[t.model_dump() for t in self.tasks],
			plan_topic=self.plan_topic,
			plan_days=self.plan_days,
			study_plan=plan.model_dump() if plan else None,
		)
		return data
