import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from app.api.routes import router
from app.config import settings
from app.services import PredictorService, build_service


def setup_logging(level: str = settings.log_level):
    logging.basicConfig(level=level.upper(), format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")


def create_app(service: PredictorService | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging()
        logging.getLogger(__name__).info("history capacity %d, upstream %s",
                                         app.state.service.store.max_length, settings.upstream_url)
        yield

    app = FastAPI(title="TaiXiu Predictor", lifespan=lifespan)
    app.state.service = service or build_service(settings)
    app.include_router(router)

    @app.get("/", response_class=PlainTextResponse)
    def home():
        return "TaiXiu Predictor is running"

    return app


app = create_app()
