####################################
# --- Request/response schemas --- #
####################################

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class UploadFileResponse(BaseModel):
    """Response model for `POST /upload`."""
    file_id: str = Field(
        alias="fileId",
        description="Identifier to fetch or delete the file with.",
        json_schema_extra={"example": "dc-1234567890"},
    )
    src: str = Field(description="Path that serves the file.")
    file_name: str = Field(alias="fileName")
    file_size: int = Field(alias="fileSize")
    content_type: Optional[str] = Field(None, alias="contentType")
    storage: str = Field(description="discord or r2")
    mode: Optional[str] = Field(None, description="Discord backend that stored the file (bot or webhook).")

    model_config = ConfigDict(populate_by_name=True)


class DeleteFileResponse(BaseModel):
    """Response model for `DELETE /api/manage/delete/{file_id}`."""
    success: bool
    message: Optional[str] = None
    file_id: Optional[str] = Field(None, alias="fileId")
    error: Optional[str] = None

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "success": True,
                "message": "File deleted",
                "fileId": "r2:3f2a9c.png",
            }
        },
    )


class DeleteMessageResponse(BaseModel):
    """Response model for `DELETE /api/manage/discord/{channel_id}/{message_id}`."""
    success: bool


class ConnectionStatusResponse(BaseModel):
    connected: bool
    mode: Optional[str] = None
    name: Optional[str] = None
    channel_id: Optional[str] = Field(None, alias="channelId")

    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    status: str
    components: Dict[str, Any]
    discord: ConnectionStatusResponse
