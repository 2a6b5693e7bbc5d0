from __future__ import annotations
from typing import Literal, Type, TypeVar

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..gemini_client import GeminiClient
from ..panels import Panel
from ..panels.base import ClientFactory
from ..shell import DEFAULT_VIEW, Shell, close_shell, create_shell, get_shell

router = APIRouter(prefix="/shell", tags=["shell"])

View = Literal["dashboard", "writer", "presenter", "visualizer", "analyzer", "speaker", "studier", "planner"]

P = TypeVar("P", bound=Panel)


def get_client_factory() -> ClientFactory:
	return GeminiClient


def require_shell(shell_id: str) -> Shell:
	shell = get_shell(shell_id)
	if shell is None:
		raise HTTPException(status_code=404, detail="Shell not found or closed")
	return shell


def require_panel(shell: Shell, panel_type: Type[P]) -> P:
	if not isinstance(shell.panel, panel_type):
		raise HTTPException(
			status_code=409,
			detail=f"{panel_type.view} is not the mounted panel (current: {shell.current_view})",
		)
	return shell.panel


class CreateShellRequest(BaseModel):
	view: View = DEFAULT_VIEW


class NavigateRequest(BaseModel):
	view: View


@router.post("")
async def create(req: CreateShellRequest | None = None, client_factory: ClientFactory = Depends(get_client_factory)):
	shell = await create_shell(client_factory, view=(req.view if req else DEFAULT_VIEW))
	return shell.snapshot()


@router.get("/{shell_id}")
async def state(shell: Shell = Depends(require_shell)):
	return shell.snapshot()


@router.post("/{shell_id}/navigate")
async def navigate(req: NavigateRequest, shell: Shell = Depends(require_shell)):
	await shell.navigate(req.view)
	return shell.snapshot()


@router.delete("/{shell_id}")
async def delete(shell_id: str):
	if not await close_shell(shell_id):
		raise HTTPException(status_code=404, detail="Shell not found or closed")
	return {"closed": shell_id}
