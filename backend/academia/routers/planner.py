from __future__ import annotations
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..panels import PlannerPanel
from ..shell import Shell
from .shell import require_panel, require_shell

router = APIRouter(prefix="/shell/{shell_id}/planner", tags=["planner"])


class ModeRequest(BaseModel):
	mode: Literal["tasks", "studyPlan"]


class AddTaskRequest(BaseModel):
	title: str = ""
	due_date: str = ""


class PlanRequest(BaseModel):
	topic: Optional[str] = None
	days: Optional[int] = Field(default=None, ge=1, le=30)


def _planner(shell: Shell = Depends(require_shell)) -> PlannerPanel:
	return require_panel(shell, PlannerPanel)


@router.post("/mode")
async def set_mode(req: ModeRequest, panel: PlannerPanel = Depends(_planner)):
	panel.set_mode(req.mode)
	return panel.snapshot()


@router.post("/tasks")
async def add_task(req: AddTaskRequest, panel: PlannerPanel = Depends(_planner)):
	panel.add_task(req.title, req.due_date)
	return panel.snapshot()


@router.post("/tasks/{task_id}/toggle")
async def toggle_task(task_id: int, panel: PlannerPanel = Depends(_planner)):
	try:
		panel.toggle_task(task_id)
	except KeyError:
		raise HTTPException(status_code=404, detail="Task not found")
	return panel.snapshot()


@router.delete("/tasks/{task_id}")
async def delete_task(task_id: int, panel: PlannerPanel = Depends(_planner)):
	try:
		panel.delete_task(task_id)
	except KeyError:
		raise HTTPException(status_code=404, detail="Task not found")
	return panel.snapshot()


@router.post("/plan")
async def generate_plan(req: PlanRequest, panel: PlannerPanel = Depends(_planner)):
	await panel.generate_plan(req.topic, req.days)
	return panel.snapshot()
