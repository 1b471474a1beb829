import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobtracker.config import settings
from jobtracker.api import (
    application_routes,
    export_routes,
    generate_routes,
    jd_routes,
    resume_routes,
    tracker_routes,
)
from jobtracker.services.autosave import resume_saver

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("LiteLLM").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"{settings.app_name} starting (data_dir={settings.data_dir})")
    yield
    # Persist edits still waiting on the debounce timer
    await resume_saver.flush()
    resume_saver.cancel_all()
    logger.info(f"{settings.app_name} stopped")


app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Job application tracker with AI resume tailoring and document export",
    lifespan=lifespan,
)

# ── CORS ────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ─────────────────────────────────────────────────────────────────

app.include_router(generate_routes.router, prefix="/api", tags=["Generation"])
app.include_router(export_routes.router, prefix="/api/export", tags=["Export"])
app.include_router(resume_routes.router, prefix="/api/resume", tags=["Master Resume"])
app.include_router(jd_routes.router, prefix="/api/jobs", tags=["Job Descriptions"])
app.include_router(application_routes.router, prefix="/api/applications", tags=["Applications"])
app.include_router(tracker_routes.router, prefix="/api/tracker", tags=["Tracker"])

# ── Health Check ────────────────────────────────────────────────────────────


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name, "version": "0.1.0"}
