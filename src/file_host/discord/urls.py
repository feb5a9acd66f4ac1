"""Webhook URL building."""

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

# Only meaningful when creating a message; must not reach lookup/delete URLs.
TRANSPORT_ONLY_PARAMS = frozenset({"wait"})


def build_webhook_message_url(webhook_url: str, message_id: Optional[str] = None) -> str:
    """
    Build the URL of a webhook, or of one message posted through it.

    :param webhook_url: The configured webhook URL, e.g. ``https://discord.com/api/webhooks/1/tok?thread_id=5``.
    :param message_id: When given, address ``/messages/{message_id}`` under the webhook.
    :return: The URL with every query parameter of ``webhook_url`` kept except ``wait``.
    """
    parts = urlsplit(webhook_url)
    path = parts.path[:-1] if parts.path.endswith("/") else parts.path
    if message_id:
        path = f"{path}/messages/{message_id}"

    params = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in TRANSPORT_ONLY_PARAMS
    ]
    return urlunsplit((parts.scheme, parts.netloc, path, urlencode(params), ""))
