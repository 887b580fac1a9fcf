import logging
import tomllib
from contextlib import asynccontextmanager

import setproctitle
from alembic import command
from alembic.config import Config
from brotli_asgi import BrotliMiddleware
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.middleware import Middleware

import settings
from routes.follow import router as follow_router
from routes.friendship import router as friendship_router
from services.errors import RelationshipError
from utils.logs import setup_logs

logger = logging.getLogger("acadnet.main")
setup_logs()
setproctitle.setproctitle("Acadnet API")


def get_version() -> str:
    with open(settings.PROJECT_PATH / "pyproject.toml", "rb") as f:
        return tomllib.load(f)["project"]["version"]


def update_database():  # pragma: no cover
    """Bring the schema to the latest Alembic revision"""
    config = Config(str(settings.BACKEND_DIR / "alembic.ini"))
    config.set_main_option(
        "script_location", str(settings.BACKEND_DIR / "migrations")
    )
    try:
        command.upgrade(config, "head")
    except Exception as e:
        logger.exception(f"Cannot run DB migrations: {e}")


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    logger.debug(f"Starting {app.title} {app.version}")
    if not settings.TESTING_MODE:
        update_database()
    yield
    logger.debug("Closing app")


async def relationship_error_handler(request: Request, exc: RelationshipError):
    """Domain failures become `{"detail": ...}` with their own status code"""
    logger.debug(f"{request.method} {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


def create_app() -> FastAPI:
    app = FastAPI(
        title="ACADNET",
        description="Friends and follows of the academic network",
        version=get_version(),
        middleware=[Middleware(BrotliMiddleware, minimum_size=1000)],
        swagger_ui_parameters={"defaultModelsExpandDepth": 0},
        lifespan=app_lifespan,
    )
    app.add_exception_handler(RelationshipError, relationship_error_handler)

    api_router = APIRouter()

    @api_router.get("/")
    async def index():
        return {"status": "ok", "version": app.version}

    api_router.include_router(friendship_router, tags=["friendship"])
    api_router.include_router(follow_router, tags=["follow"])
    app.include_router(api_router, prefix=settings.API_PREFIX)
    return app
