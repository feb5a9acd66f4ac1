"""
Single HTTP calls against the Discord bot API and webhooks.

Every function performs exactly one request. Non-success statuses raise
``DiscordAPIError``; network faults surface as ``requests`` exceptions.
Choosing between bot and webhook is the coordinators' job, not this module's.
"""

import json
import logging
from typing import Any, Dict, Optional

import requests

from file_host.discord.urls import build_webhook_message_url
from file_host.errors import DiscordAPIError
from file_host.utils.decorators import log_execution_time

logger = logging.getLogger(__name__)

DISCORD_API_BASE = "https://discord.com/api/v10"
DEFAULT_TIMEOUT = 30.0

Message = Dict[str, Any]


def _bot_headers(bot_token: str) -> Dict[str, str]:
    return {"Authorization": f"Bot {bot_token}"}


def _http(session: Optional[requests.Session]):
    return session if session is not None else requests


def _raise_for_status(response: requests.Response) -> None:
    if response.ok:
        return
    try:
        body = response.json()
    except ValueError:
        body = {}
    message = body.get("message") if isinstance(body, dict) else None
    raise DiscordAPIError(response.status_code, message)


def _attachment_form(file_bytes: bytes, filename: str, content_type: Optional[str]) -> Dict[str, Any]:
    payload = {"content": "", "attachments": [{"id": 0, "filename": filename}]}
    return {
        "files[0]": (filename, file_bytes, content_type or "application/octet-stream"),
        "payload_json": (None, json.dumps(payload), "application/json"),
    }


@log_execution_time(label="discord.bot.upload")
def upload_via_bot(
    file_bytes: bytes,
    filename: str,
    content_type: Optional[str],
    bot_token: str,
    channel_id: str,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Message:
    """Post a message carrying the file into ``channel_id``; returns the created message."""
    response = _http(session).post(
        f"{DISCORD_API_BASE}/channels/{channel_id}/messages",
        headers=_bot_headers(bot_token),
        files=_attachment_form(file_bytes, filename, content_type),
        timeout=timeout,
    )
    _raise_for_status(response)
    return response.json()


@log_execution_time(label="discord.webhook.upload")
def upload_via_webhook(
    file_bytes: bytes,
    filename: str,
    content_type: Optional[str],
    webhook_url: str,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Message:
    """Execute the webhook with ``wait=true`` so Discord returns the created message."""
    response = _http(session).post(
        build_webhook_message_url(webhook_url),
        params={"wait": "true"},
        files=_attachment_form(file_bytes, filename, content_type),
        timeout=timeout,
    )
    _raise_for_status(response)
    return response.json()


@log_execution_time(label="discord.bot.get_message")
def fetch_message_via_bot(
    channel_id: str,
    message_id: str,
    bot_token: str,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Optional[Message]:
    """Return the message, or None when Discord answers 404."""
    response = _http(session).get(
        f"{DISCORD_API_BASE}/channels/{channel_id}/messages/{message_id}",
        headers=_bot_headers(bot_token),
        timeout=timeout,
    )
    if response.status_code == 404:
        return None
    _raise_for_status(response)
    return response.json()


@log_execution_time(label="discord.webhook.get_message")
def fetch_message_via_webhook(
    message_id: str,
    webhook_url: str,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Optional[Message]:
    """Return the message, or None when Discord answers 404."""
    response = _http(session).get(
        build_webhook_message_url(webhook_url, message_id),
        timeout=timeout,
    )
    if response.status_code == 404:
        return None
    _raise_for_status(response)
    return response.json()


def _delete_succeeded(response: requests.Response) -> bool:
    return response.ok or response.status_code == 204


@log_execution_time(label="discord.bot.delete_message")
def delete_message_via_bot(
    channel_id: str,
    message_id: str,
    bot_token: str,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bool:
    response = _http(session).delete(
        f"{DISCORD_API_BASE}/channels/{channel_id}/messages/{message_id}",
        headers=_bot_headers(bot_token),
        timeout=timeout,
    )
    if not _delete_succeeded(response):
        logger.warning(f"Bot delete of message {message_id} returned HTTP {response.status_code}")
        return False
    return True


@log_execution_time(label="discord.webhook.delete_message")
def delete_message_via_webhook(
    message_id: str,
    webhook_url: str,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> bool:
    response = _http(session).delete(
        build_webhook_message_url(webhook_url, message_id),
        timeout=timeout,
    )
    if not _delete_succeeded(response):
        logger.warning(f"Webhook delete of message {message_id} returned HTTP {response.status_code}")
        return False
    return True


@log_execution_time(label="discord.bot.whoami")
def fetch_bot_user(
    bot_token: str,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    response = _http(session).get(
        f"{DISCORD_API_BASE}/users/@me",
        headers=_bot_headers(bot_token),
        timeout=timeout,
    )
    _raise_for_status(response)
    return response.json()


@log_execution_time(label="discord.webhook.info")
def fetch_webhook_info(
    webhook_url: str,
    session: Optional[requests.Session] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Dict[str, Any]:
    response = _http(session).get(build_webhook_message_url(webhook_url), timeout=timeout)
    _raise_for_status(response)
    return response.json()
