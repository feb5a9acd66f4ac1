import logging
from textwrap import dedent

import pydantic
from fastapi import FastAPI
from fastapi.routing import APIRoute

from file_host.config.settings import Settings
from file_host.errors import (
    handle_broad_exceptions,
    handle_pydantic_validation_errors,
)
from file_host.routers.files import router as files_router
from file_host.routers.health import router as health_router
from file_host.services.files import FileService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, file_service: FileService | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = FastAPI(
        title="File Host",
        summary="Store files on Discord or R2",
        version="v1",
        description=dedent(
            """\
        Files are uploaded to Discord (bot first, webhook as fallback) or to an
        R2 bucket; metadata lives in a key-value index.

        | Storage | File id |
        | --- | --- |
        | Discord | `dc-<message id>` |
        | R2 | `r2:<bucket key>` |
        """
        ),
        docs_url="/",
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.state.settings = settings
    app.state.file_service = file_service or FileService.from_settings(settings)
    logger.info(f"{settings.app_name} ready, bucket {'enabled' if settings.bucket_enabled else 'disabled'}")

    app.include_router(files_router, tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
