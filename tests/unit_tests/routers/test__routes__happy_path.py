from unittest.mock import patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from file_host.config.settings import DiscordConfig, Settings
from file_host.discord.models import (
    AttachmentDescriptor,
    BackendError,
    BackendMode,
    ConnectionStatus,
    LookupResult,
    LookupStatus,
    UploadResult,
)
from file_host.main import create_app
from file_host.services.files import FileService
from file_host.services.purger import PurgeResult
from tests.consts import (
    TEST_ATTACHMENT_URL,
    TEST_CHANNEL_ID,
    TEST_FILE_CONTENT,
    TEST_FILE_CONTENT_TYPE,
    TEST_FILE_NAME,
    TEST_MESSAGE_ID,
)

SERVICES = "file_host.services.files"

DESCRIPTOR = AttachmentDescriptor(
    url=TEST_ATTACHMENT_URL,
    filename=TEST_FILE_NAME,
    size=len(TEST_FILE_CONTENT),
    content_type=TEST_FILE_CONTENT_TYPE,
    attachment_id="900",
    channel_id=TEST_CHANNEL_ID,
    message_id=TEST_MESSAGE_ID,
)


@pytest.fixture
def service(both_config, metadata_store, bucket_store):
    return FileService(both_config, metadata_store, bucket_store)


@pytest.fixture
def client(service) -> TestClient:
    app = create_app(settings=Settings(_env_file=None), file_service=service)
    with TestClient(app) as client:
        yield client


def _upload(client: TestClient, storage: str = "discord"):
    return client.post(
        f"/upload?storage={storage}",
        files={"file": (TEST_FILE_NAME, TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)},
    )


def test__upload_file_to_bucket__happy_path(client: TestClient):
    response = _upload(client, "r2")

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["fileId"].startswith("r2:")
    assert body["src"] == f"/file/{body['fileId']}"
    assert body["fileName"] == TEST_FILE_NAME
    assert body["fileSize"] == len(TEST_FILE_CONTENT)
    assert body["storage"] == "r2"


def test__upload_file_to_discord__happy_path(client: TestClient):
    with patch(f"{SERVICES}.upload_to_discord", return_value=UploadResult.succeeded(DESCRIPTOR, BackendMode.BOT)):
        response = _upload(client)

    assert response.status_code == status.HTTP_201_CREATED
    body = response.json()
    assert body["fileId"] == f"dc-{TEST_MESSAGE_ID}"
    assert body["mode"] == "bot"
    assert body["storage"] == "discord"


def test__upload_file__all_backends_failed(client: TestClient):
    failure = UploadResult.failed([
        BackendError(BackendMode.BOT, "Missing Access"),
        BackendError(BackendMode.WEBHOOK, "Unknown Webhook"),
    ])
    with patch(f"{SERVICES}.upload_to_discord", return_value=failure):
        response = _upload(client)

    assert response.status_code == status.HTTP_502_BAD_GATEWAY
    assert response.json()["detail"] == "Bot: Missing Access | Webhook: Unknown Webhook"


def test__upload_file__discord_not_configured(metadata_store):
    service = FileService(DiscordConfig(), metadata_store)
    app = create_app(settings=Settings(_env_file=None), file_service=service)
    with TestClient(app) as client:
        response = _upload(client)

    assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


def test__upload_file__empty_file(client: TestClient):
    response = client.post("/upload", files={"file": (TEST_FILE_NAME, b"", TEST_FILE_CONTENT_TYPE)})

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test__get_bucket_file(client: TestClient):
    file_id = _upload(client, "r2").json()["fileId"]

    response = client.get(f"/file/{file_id}")

    assert response.status_code == status.HTTP_200_OK
    assert response.content == TEST_FILE_CONTENT
    assert response.headers["content-type"] == TEST_FILE_CONTENT_TYPE
    assert response.headers["content-disposition"] == f'inline; filename="{TEST_FILE_NAME}"'


def test__get_bucket_file__non_ascii_name(client: TestClient):
    upload = client.post(
        "/upload?storage=r2",
        files={"file": ("猫 photo.png", TEST_FILE_CONTENT, TEST_FILE_CONTENT_TYPE)},
    )
    assert upload.status_code == status.HTTP_201_CREATED

    response = client.get(f"/file/{upload.json()['fileId']}")

    assert response.status_code == status.HTTP_200_OK
    assert response.content == TEST_FILE_CONTENT
    assert response.headers["content-disposition"] == "inline; filename*=utf-8''%E7%8C%AB%20photo.png"


def test__get_discord_file__redirects(client: TestClient, metadata_store):
    metadata_store.put("dc-42", {"channelId": TEST_CHANNEL_ID, "messageId": TEST_MESSAGE_ID})
    found = LookupResult(LookupStatus.FOUND, descriptor=DESCRIPTOR, mode=BackendMode.BOT)
    with patch(f"{SERVICES}.get_discord_file", return_value=found):
        response = client.get("/file/dc-42", follow_redirects=False)

    assert response.status_code == status.HTTP_307_TEMPORARY_REDIRECT
    assert response.headers["location"] == TEST_ATTACHMENT_URL


def test__get_discord_file__lookup_failed(client: TestClient, metadata_store):
    metadata_store.put("dc-42", {"channelId": TEST_CHANNEL_ID, "messageId": TEST_MESSAGE_ID})
    failed = LookupResult(LookupStatus.FAILED, errors=[BackendError(BackendMode.WEBHOOK, "HTTP 500")])
    with patch(f"{SERVICES}.get_discord_file", return_value=failed):
        response = client.get("/file/dc-42")

    assert response.status_code == status.HTTP_502_BAD_GATEWAY


def test__get_file__not_found(client: TestClient):
    response = client.get("/file/dc-does-not-exist")

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test__delete_file__happy_path(client: TestClient, metadata_store):
    file_id = _upload(client, "r2").json()["fileId"]

    response = client.delete(f"/api/manage/delete/{file_id}")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True, "message": "File deleted", "fileId": file_id, "error": None}
    assert metadata_store.get(file_id) is None
    assert client.get(f"/file/{file_id}").status_code == status.HTTP_404_NOT_FOUND



def test__delete_file__bare_bucket_prefix(client: TestClient, metadata_store):
    metadata_store.put("r2:", {"fileName": "stray"})

    response = client.delete("/api/manage/delete/r2:")

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["fileId"] == "r2:"
    assert metadata_store.get("r2:") is None

def test__delete_file__metadata_failure(client: TestClient, service):
    failure = PurgeResult(success=False, file_id="dc-1", error="database is locked")
    with patch.object(service, "delete_file", return_value=failure):
        response = client.delete("/api/manage/delete/dc-1")

    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json() == {"success": False, "error": "database is locked"}


def test__delete_message(client: TestClient, service):
    with patch.object(service, "delete_message", return_value=True) as delete:
        response = client.delete(f"/api/manage/discord/{TEST_CHANNEL_ID}/{TEST_MESSAGE_ID}")

    assert response.json() == {"success": True}
    delete.assert_called_once_with(TEST_CHANNEL_ID, TEST_MESSAGE_ID)


def test__health(client: TestClient, service):
    connected = ConnectionStatus(connected=True, mode=BackendMode.BOTH, name="FileBot / Uploader", channel_id="100")
    with patch.object(service, "connection_status", return_value=connected):
        response = client.get("/health")

    body = response.json()
    assert response.status_code == status.HTTP_200_OK
    assert body["status"] == "ok"
    assert body["components"]["bucket"] == "ready"
    assert body["discord"] == {
        "connected": True,
        "mode": "bot+webhook",
        "name": "FileBot / Uploader",
        "channelId": "100",
    }


def test__health__discord_down(client: TestClient, service):
    with patch.object(service, "connection_status", return_value=ConnectionStatus(connected=False)):
        body = client.get("/health").json()

    assert body["status"] == "degraded"
    assert body["discord"]["connected"] is False
