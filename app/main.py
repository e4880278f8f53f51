# app/main.py
from fastapi import FastAPI

from app.api.routes import availability, health
from app.core.config import get_settings
from app.core.logging import configure_logging
from app.db.session import init_db


def create_app() -> FastAPI:
    """
    Application factory for the CalendAI availability service.
    """
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(
        title=settings.APP_NAME,
        description=(
            "Computes bookable meeting slots for hosts: weekly working hours in\n"
            "the host's timezone, minimum notice and booking horizon, buffers,\n"
            "and conflicts with Google Calendar events and confirmed bookings."
        ),
        version="0.1.0",
    )

    # Routers
    app.include_router(health.router)
    app.include_router(availability.router)

    @app.on_event("startup")
    async def on_startup() -> None:  # pragma: no cover
        await init_db()

    return app


app = create_app()
