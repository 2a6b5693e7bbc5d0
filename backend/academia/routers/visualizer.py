from __future__ import annotations
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from ..panels import VisualizerPanel
from ..shell import Shell
from .shell import require_panel, require_shell

router = APIRouter(prefix="/shell/{shell_id}/visualizer", tags=["visualizer"])


class GenerateRequest(BaseModel):
	mode: Optional[Literal["image", "conceptMap"]] = None
	prompt: Optional[str] = None
	aspect_ratio: Optional[Literal["1:1", "16:9", "9:16", "4:3", "3:4"]] = None


@router.post("/generate")
async def generate(req: GenerateRequest, shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, VisualizerPanel)
	await panel.generate(mode=req.mode, prompt=req.prompt, aspect_ratio=req.aspect_ratio)
	return panel.snapshot()


@router.get("/image")
async def image(shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, VisualizerPanel)
	if panel.image is None:
		raise HTTPException(status_code=404, detail="No image generated yet")
	return Response(
		content=panel.image.data,
		media_type=panel.image.mime_type,
		headers={"Content-Disposition": 'attachment; filename="academia-ai-image.jpg"'},
	)
