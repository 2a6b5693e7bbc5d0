from __future__ import annotations
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..panels import StudierPanel
from ..shell import Shell
from .shell import require_panel, require_shell

router = APIRouter(prefix="/shell/{shell_id}/studier", tags=["studier"])

Mode = Literal["flashcards", "quiz", "exam"]


class ModeRequest(BaseModel):
	mode: Mode


class GenerateRequest(BaseModel):
	mode: Optional[Mode] = None
	notes: Optional[str] = None
	exam_topic: Optional[str] = None


class AnswerRequest(BaseModel):
	index: int
	option: str


def _studier(shell: Shell = Depends(require_shell)) -> StudierPanel:
	return require_panel(shell, StudierPanel)


@router.post("/mode")
async def set_mode(req: ModeRequest, panel: StudierPanel = Depends(_studier)):
	panel.set_mode(req.mode)
	return panel.snapshot()


@router.post("/generate")
async def generate(req: GenerateRequest, panel: StudierPanel = Depends(_studier)):
	await panel.generate(mode=req.mode, notes=req.notes, exam_topic=req.exam_topic)
	return panel.snapshot()


@router.post("/flip")
async def flip(panel: StudierPanel = Depends(_studier)):
	panel.flip()
	return panel.snapshot()


@router.post("/previous")
async def previous_card(panel: StudierPanel = Depends(_studier)):
	panel.previous_card()
	return panel.snapshot()


@router.post("/next")
async def next_card(panel: StudierPanel = Depends(_studier)):
	panel.next_card()
	return panel.snapshot()


@router.post("/answer")
async def answer(req: AnswerRequest, panel: StudierPanel = Depends(_studier)):
	try:
		panel.answer(req.index, req.option)
	except (IndexError, ValueError) as e:
		raise HTTPException(status_code=400, detail=str(e))
	return panel.snapshot()


@router.post("/submit")
async def submit(panel: StudierPanel = Depends(_studier)):
	if not panel.quiz:
		raise HTTPException(status_code=400, detail="No quiz to submit")
	panel.submit()
	return panel.snapshot()


@router.post("/retry")
async def retry(panel: StudierPanel = Depends(_studier)):
	panel.retry()
	return panel.snapshot()
