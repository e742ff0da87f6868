"""
Auto-Reply Service - FastAPI application

GET / starts the background task that answers unread Gmail messages
containing trigger phrases.
"""
import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import BackgroundTasks, FastAPI
from fastapi.responses import PlainTextResponse

load_dotenv()

from .config import Settings
from .models import HealthResponse
from .scheduler import PollScheduler

settings = Settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Single scheduler per process; repeated triggers reuse it
scheduler = PollScheduler(settings)


async def start_scheduler():
    """Background task started by the trigger endpoint"""
    try:
        await scheduler.launch()
    except Exception as e:
        logger.error(f"Failed to start auto-reply task: {e}", exc_info=True)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown"""
    logger.info(f"Starting Auto-Reply Service (label: '{settings.label_name}', "
                f"{len(settings.keywords)} keywords)")

    yield

    logger.info("Shutting down Auto-Reply Service")
    await scheduler.stop()


app = FastAPI(
    title="Auto-Reply Service",
    description="Replies to unread Gmail messages that contain trigger phrases",
    version="1.0.0",
    lifespan=lifespan
)


@app.get("/", response_class=PlainTextResponse)
async def trigger(background_tasks: BackgroundTasks):
    """Start the auto-reply task; the response does not wait for it"""
    if not scheduler.reserve():
        return "Task already running!"

    background_tasks.add_task(start_scheduler)
    return "Task started!"


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        service="auto-reply",
        scheduler_running=scheduler.is_running,
        interval_seconds=scheduler.interval,
        label_id=scheduler.label_id,
        replied_count=scheduler.replied_count,
        last_tick=scheduler.last_summary
    )


def run():
    """Console entry point"""
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
