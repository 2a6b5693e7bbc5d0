from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..models import Location
from ..shell import Shell
from .shell import require_shell

router = APIRouter(prefix="/shell/{shell_id}/chat", tags=["chat"])


class SendRequest(BaseModel):
	message: str
	use_maps: Optional[bool] = None
	location: Optional[Location] = None


@router.post("/toggle")
async def toggle(shell: Shell = Depends(require_shell)):
	shell.chat.toggle()
	return shell.chat.snapshot()


@router.post("/send")
async def send(req: SendRequest, shell: Shell = Depends(require_shell)):
	await shell.chat.send(req.message, use_maps=req.use_maps, location=req.location)
	return shell.chat.snapshot()


@router.delete("/messages")
async def clear(shell: Shell = Depends(require_shell)):
	shell.chat.clear()
	return shell.chat.snapshot()
