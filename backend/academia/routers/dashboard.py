from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends

from ..models import ProgressData
from ..panels import DashboardPanel
from ..shell import Shell
from .shell import require_panel, require_shell

router = APIRouter(prefix="/shell/{shell_id}/dashboard", tags=["dashboard"])


@router.post("/refresh")
async def refresh(progress: Optional[ProgressData] = None, shell: Shell = Depends(require_shell)):
	panel = require_panel(shell, DashboardPanel)
	await panel.refresh(progress)
	return panel.snapshot()
