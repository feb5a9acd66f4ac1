from fastapi import APIRouter, Depends

from file_host.dependencies import get_file_service
from file_host.schemas import HealthResponse
from file_host.services.files import FileService

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health_check(service: FileService = Depends(get_file_service)):
    """
    Health check endpoint for monitoring API status and backend readiness.

    Every configured Discord backend is probed; the bucket and metadata
    index report whether they are configured and reachable.
    """
    health_status = {
        "status": "ok",
        "components": {
            "api": "ready",
            "metadata": "ready",
            "bucket": "ready" if service.bucket_store is not None else "disabled",
        },
    }

    try:
        service.metadata_store.list_keys(limit=1)
    except Exception as e:
        health_status["components"]["metadata"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    discord = service.connection_status()
    if not discord.connected:
        health_status["status"] = "degraded"
    health_status["discord"] = discord.to_dict()

    return health_status
