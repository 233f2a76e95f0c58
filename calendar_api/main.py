"""Calendar API - event CRUD plus the background reminder scan.

The reminder scheduler starts with the app and stops on shutdown.
Run with: uvicorn calendar_api.main:app --port 8100
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI

from config import API_HOST, API_PORT
from domains.events import ReminderDispatcher, ReminderScheduler, get_event_store
from logger import logger
from .event_routes import router as event_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    reminders = ReminderScheduler(get_event_store(), ReminderDispatcher())
    reminders.start()
    app.state.reminders = reminders
    logger.info("Calendar API started")
    try:
        yield
    finally:
        reminders.stop()
        app.state.reminders = None
        logger.info("Calendar API stopped")


app = FastAPI(
    title="Calendar API",
    description="Calendar events with one-day and one-hour email reminders",
    version="1.0.0",
    lifespan=lifespan,
)

app.include_router(event_router)


# ============================================================
# Health Check
# ============================================================

@app.get("/health")
async def health():
    """Health check endpoint."""
    reminders = getattr(app.state, "reminders", None)
    return {
        "status": "ok",
        "scheduler": bool(reminders and reminders.running),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=API_HOST, port=API_PORT)
