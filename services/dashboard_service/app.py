import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from libs.log import configure_logging
from .routers.http import router as http_router
from .routers.ws import router as ws_router
from .runtime import DashboardRuntime, DashboardSettings


def create_app(settings: Optional[DashboardSettings] = None) -> FastAPI:
    settings = settings or DashboardSettings.from_config()
    configure_logging(settings.log_level)
    runtime = DashboardRuntime(settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        runtime.attach_loop(asyncio.get_running_loop())
        if settings.autostart:
            runtime.ticker.start()
        try:
            yield
        finally:
            await runtime.shutdown()

    app = FastAPI(title="dashboard_service", lifespan=lifespan)
    app.state.dashboard = runtime
    app.include_router(http_router)
    app.include_router(ws_router)
    return app


app = create_app()
