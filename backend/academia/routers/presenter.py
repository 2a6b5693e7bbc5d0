from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..panels import PresenterPanel
from ..shell import Shell
from .shell import require_panel, require_shell

router = APIRouter(prefix="/shell/{shell_id}/presenter", tags=["presenter"])


class GenerateRequest(BaseModel):
	topic: Optional[str] = None


@router.post("/generate")
async def generate(req: GenerateRequest, shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, PresenterPanel)
	await panel.generate(req.topic)
	return panel.snapshot()


@router.post("/previous")
async def previous(shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, PresenterPanel)
	panel.previous()
	return panel.snapshot()


@router.post("/next")
async def next_slide(shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, PresenterPanel)
	panel.next()
	return panel.snapshot()
