from __future__ import annotations
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..panels import WriterPanel
from ..shell import Shell
from .shell import require_panel, require_shell

router = APIRouter(prefix="/shell/{shell_id}/writer", tags=["writer"])


class GenerateRequest(BaseModel):
	mode: Optional[Literal["write", "enhance", "explain", "cite", "research", "plagiarism"]] = None
	engine: Optional[Literal["fast", "balanced", "complex"]] = None
	prompt: Optional[str] = None
	text: Optional[str] = None


@router.post("/generate")
async def generate(req: GenerateRequest, shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, WriterPanel)
	await panel.generate(mode=req.mode, engine=req.engine, prompt=req.prompt, text=req.text)
	return panel.snapshot()
