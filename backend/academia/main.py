from contextlib import asynccontextmanager

from fastapi import FastAPI

from .log import setup_logging
from .settings import settings
from .shell import close_all
from .routers import shell
from .routers import dashboard
from .routers import writer
from .routers import presenter
from .routers import visualizer
from .routers import analyzer
from .routers import speaker
from .routers import studier
from .routers import planner
from .routers import chat


@asynccontextmanager
async def lifespan(app: FastAPI):
	setup_logging()
	try:
		yield
	finally:
		# tear down every mounted panel so live sessions and timers stop
		await close_all()


app = FastAPI(title="Academia AI API", lifespan=lifespan)
app.include_router(shell.router)
app.include_router(dashboard.router)
app.include_router(writer.router)
app.include_router(presenter.router)
app.include_router(visualizer.router)
app.include_router(analyzer.router)
app.include_router(speaker.router)
app.include_router(studier.router)
app.include_router(planner.router)
app.include_router(chat.router)


@app.get("/info")
def root():
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key)}
