import logging
from typing import Optional
from urllib.parse import quote

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Path,
    Query,
    UploadFile,
    status
)
from fastapi.responses import JSONResponse, RedirectResponse, StreamingResponse

from file_host.dependencies import get_file_service
from file_host.errors import FileNotFoundInStoreError, FileStorageError
from file_host.schemas import (
    DeleteFileResponse,
    DeleteMessageResponse,
    UploadFileResponse,
)
from file_host.services.files import FileService, StorageTarget

logger = logging.getLogger(__name__)

router = APIRouter()


def _storage_error_to_http(e: FileStorageError) -> HTTPException:
    """Not configured -> 503, every backend refused -> 502."""
    if not e.configured:
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))


def _inline_disposition(filename: Optional[str]) -> str:
    """Header values are latin-1, so names that need escaping go out as RFC 5987 ``filename*``."""
    if not filename:
        return "inline"
    quoted = quote(filename)
    if quoted != filename:
        return f"inline; filename*=utf-8''{quoted}"
    return f'inline; filename="{filename}"'


@router.post("/upload", response_model=UploadFileResponse, status_code=status.HTTP_201_CREATED)
def upload_file(
    file: UploadFile,
    storage: StorageTarget = Query(StorageTarget.DISCORD, description="Backend to store the file in"),
    service: FileService = Depends(get_file_service),
) -> UploadFileResponse:
    """
    Upload a file.

    Discord uploads go through the bot first and fall back to the webhook;
    when both fail the error names each backend and its reason.
    """
    file_bytes = file.file.read()
    if not file_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file provided"
        )

    try:
        stored = service.store_file(
            file_bytes,
            file.filename or "file",
            file.content_type,
            target=storage,
        )
    except FileStorageError as e:
        logger.error(f"Upload failed: {e}")
        raise _storage_error_to_http(e)

    record = stored.record
    return UploadFileResponse(
        file_id=stored.file_id,
        src=f"/file/{stored.file_id}",
        file_name=record["fileName"],
        file_size=record["fileSize"],
        content_type=record.get("contentType"),
        storage=record["storage"],
        mode=record.get("mode"),
    )


@router.get("/file/{file_id:path}")
def get_file(
    file_id: str = Path(..., description="Identifier returned by the upload"),
    service: FileService = Depends(get_file_service),
):
    """
    Serve a file.

    Bucket files are streamed; Discord files redirect to a freshly resolved
    attachment URL, since Discord links expire.
    """
    try:
        resolved = service.resolve_file(file_id)
    except FileNotFoundInStoreError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except FileStorageError as e:
        logger.error(f"Lookup of {file_id} failed: {e}")
        raise _storage_error_to_http(e)

    if resolved.url:
        return RedirectResponse(resolved.url, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    return StreamingResponse(
        resolved.body,
        media_type=resolved.content_type or "application/octet-stream",
        headers={"Content-Disposition": _inline_disposition(resolved.filename)}
    )


@router.delete("/api/manage/delete/{file_id:path}", response_model=DeleteFileResponse)
def delete_file(
    file_id: str = Path(..., description="Identifier of the file to delete"),
    service: FileService = Depends(get_file_service),
):
    """Delete a file's bucket object (if any) and its metadata record."""
    result = service.delete_file(file_id)
    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": result.error},
        )
    return DeleteFileResponse(success=True, message="File deleted", file_id=result.file_id)


@router.delete(
    "/api/manage/discord/{channel_id}/{message_id}",
    response_model=DeleteMessageResponse,
)
def delete_message(
    channel_id: str,
    message_id: str,
    service: FileService = Depends(get_file_service),
) -> DeleteMessageResponse:
    """Best-effort removal of a Discord message, bot first then webhook."""
    return DeleteMessageResponse(success=service.delete_message(channel_id, message_id))
