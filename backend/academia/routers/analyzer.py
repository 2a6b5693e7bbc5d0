from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel

from ..panels import AnalyzerPanel
from ..shell import Shell
from .shell import require_panel, require_shell

router = APIRouter(prefix="/shell/{shell_id}/analyzer", tags=["analyzer"])

MAX_IMAGE_BYTES = 20 * 1024 * 1024


class AnalyzeRequest(BaseModel):
	prompt: Optional[str] = None


@router.post("/image")
async def select_image(file: UploadFile = File(...), shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, AnalyzerPanel)
	content = await file.read()
	if not content:
		raise HTTPException(status_code=400, detail="Uploaded file is empty")
	if len(content) > MAX_IMAGE_BYTES:
		raise HTTPException(status_code=413, detail="Image is too large to analyze inline")
	try:
		panel.select_image(content, file.content_type or "", file.filename or "")
	except ValueError as e:
		raise HTTPException(status_code=400, detail=str(e))
	return panel.snapshot()


@router.post("/analyze")
async def analyze(req: AnalyzeRequest, shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, AnalyzerPanel)
	await panel.analyze(req.prompt)
	return panel.snapshot()
