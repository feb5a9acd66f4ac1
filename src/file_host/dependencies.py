from fastapi import Request

from file_host.services.files import FileService


def get_file_service(request: Request) -> FileService:
    """FileService built once in create_app."""
    return request.app.state.file_service
