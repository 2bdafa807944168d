from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from escrow_notifications.application.use_cases.notifications import NotificationProvider
from escrow_notifications.config import get_settings
from escrow_notifications.infrastructure.notifications import snapshot_publisher
from escrow_notifications.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the notification provider on startup and tear it down on shutdown."""

    provider = NotificationProvider(get_settings()).open()
    unsubscribe = provider.context.subscribe(snapshot_publisher)
    app.state.notification_provider = provider
    try:
        yield
    finally:
        unsubscribe()
        provider.close()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    settings = get_settings()
    app = FastAPI(title="Escrow Notifications", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app


app = create_app()
