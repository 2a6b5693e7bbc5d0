from typing import Dict, Type

from .analyzer import AnalyzerPanel
from .base import Panel
from .chat import ChatPanel
from .dashboard import DashboardPanel
from .planner import PlannerPanel
from .presenter import PresenterPanel
from .speaker import SpeakerPanel
from .studier import StudierPanel
from .visualizer import VisualizerPanel
from .writer import WriterPanel

PANELS: Dict[str, Type[Panel]] = {
	cls.view: cls
	for cls in (
		DashboardPanel,
		WriterPanel,
		PresenterPanel,
		VisualizerPanel,
		AnalyzerPanel,
		SpeakerPanel,
		StudierPanel,
		PlannerPanel,
	)
}

VIEWS = tuple(PANELS)

__all__ = [
	"PANELS",
	"VIEWS",
	"Panel",
	"ChatPanel",
	"AnalyzerPanel",
	"DashboardPanel",
	"PlannerPanel",
	"PresenterPanel",
	"SpeakerPanel",
	"StudierPanel",
	"VisualizerPanel",
	"WriterPanel",
]
