"""MentorQuest - FastAPI app entry point."""
import asyncio
import contextlib
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from mentorquest.core.clock import get_clock
from mentorquest.core.config import get_settings
from mentorquest.core.errors import NotFoundError, ValidationError
from mentorquest.db.base import Base
from mentorquest.db.session import SessionLocal, engine
from mentorquest.routers import admin, api, auth
from mentorquest.services.scheduler import daily_loop

settings = get_settings()
logger = logging.getLogger("mentorquest")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.log_level)
    Base.metadata.create_all(bind=engine)

    task = None
    if settings.qotd_scheduler_enabled:
        task = asyncio.create_task(
            daily_loop(SessionLocal, get_clock(), settings.qotd_run_hour, settings.qotd_run_minute)
        )
    yield
    if task is not None:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


app = FastAPI(
    title=settings.app_name,
    description="Gamified coding practice: points, streaks, badges, question of the day",
    lifespan=lifespan,
)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=422,
        content={"detail": [{"loc": ["body", exc.field], "msg": exc.message}]},
    )


app.include_router(auth.router)
app.include_router(api.router)
app.include_router(admin.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
