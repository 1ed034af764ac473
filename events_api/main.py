from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from events_api.core.config import settings
from events_api.core.logging_config import setup_logging
from events_api.database.db import Base, engine
from events_api.models import attendees, events, users  # noqa: F401  (register tables)
from events_api.routes import attendees as attendee_routes
from events_api.routes import auth as auth_routes
from events_api.routes import events as event_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create all tables (in production, use migrations such as Alembic)
    Base.metadata.create_all(bind=engine)
    yield


def create_app() -> FastAPI:
    setup_logging(settings.log_level)

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)

    origins = [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_routes.router)
    app.include_router(event_routes.router)
    app.include_router(attendee_routes.router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("events_api.main:app", host="0.0.0.0", port=8000, log_level=settings.log_level.lower())
