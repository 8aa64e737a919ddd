import asyncio
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI, Request
from loguru import logger

from vlife.api.error_handlers import register_exception_handlers
from vlife.config.settings import settings
from vlife.core.logger import setup_logger
from vlife.db.session import check_database_connection, init_db
from vlife.integrations.exercisedb.client import sweep_exercise_cache
from vlife.integrations.exercisedb.routes import router as exercise_demo_router
from vlife.webhooks.revenuecat import router as revenuecat_router
from vlife.workouts.routes import router as workouts_router

setup_logger(level=settings.log_level, log_file=settings.log_file or None)

if not settings.openai_api_key:
    logger.warning("OPENAI_API_KEY is not set. Week generation will return 503.")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Check the database, create tables and run the ExerciseDB cache sweep while the app is up."""
    check_database_connection()
    logger.info("Ensuring database tables exist")
    init_db()

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        sweep_exercise_cache,
        trigger=IntervalTrigger(minutes=settings.exercisedb_cache_sweep_minutes),
        id="exercisedb_cache_sweep",
        name="ExerciseDB Cache Sweep",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(f"[SCHEDULER] Started ExerciseDB cache sweep (runs every {settings.exercisedb_cache_sweep_minutes} minutes)")

    await asyncio.sleep(0)
    yield

    scheduler.shutdown()
    logger.info("[SCHEDULER] Stopped ExerciseDB cache sweep")


app = FastAPI(title="V-Life API", lifespan=lifespan)

register_exception_handlers(app)

app.include_router(workouts_router)
app.include_router(revenuecat_router)
app.include_router(exercise_demo_router)

logger.info("FastAPI application initialized")


@app.get("/health")
def health():
    return {"status": "ok"}


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests."""
    logger.debug(f"Request: {request.method} {request.url.path}")
    response = await call_next(request)
    logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
    return response
