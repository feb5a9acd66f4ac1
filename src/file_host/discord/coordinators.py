"""
Bot/webhook failover for Discord-hosted files.

Each operation walks a fixed, ordered list of ``(enabled, mode, attempt)``
entries: the bot first, the webhook second. Backends are tried one after
another, never concurrently, and no coordinator raises for a backend failure;
failures come back as labelled ``BackendError`` values.
"""

import logging
from functools import partial
from typing import Any, Callable, List, Optional, Tuple

import requests

from file_host.config.settings import DiscordConfig
from file_host.discord import transport
from file_host.discord.attachments import extract_attachment
from file_host.discord.models import (
    BackendError,
    BackendMode,
    ConnectionStatus,
    LookupResult,
    LookupStatus,
    UploadResult,
    join_errors,
)
from file_host.errors import DiscordAPIError

logger = logging.getLogger(__name__)

NOT_CONFIGURED_MESSAGE = "Discord is not configured (need bot or webhook)"
NO_ATTACHMENT_MESSAGE = "no attachment in Discord response"

Attempt = Tuple[bool, BackendMode, Callable[[], Any]]


def _describe(error: Exception) -> str:
    if isinstance(error, DiscordAPIError):
        return error.message
    return str(error) or error.__class__.__name__


def upload_to_discord(
    file_bytes: bytes,
    filename: str,
    content_type: Optional[str],
    config: DiscordConfig,
    session: Optional[requests.Session] = None,
    timeout: float = transport.DEFAULT_TIMEOUT,
) -> UploadResult:
    """
    Upload a file through the bot, falling back to the webhook.

    The first backend whose response carries an attachment wins and the rest
    are not called. If every enabled backend fails, the result lists one
    labelled error per backend; with no backend enabled it carries a single
    configuration error.
    """
    attempts: List[Attempt] = [
        (
            config.bot_upload_enabled,
            BackendMode.BOT,
            partial(
                transport.upload_via_bot,
                file_bytes, filename, content_type, config.bot_token, config.channel_id,
                session=session, timeout=timeout,
            ),
        ),
        (
            config.webhook_enabled,
            BackendMode.WEBHOOK,
            partial(
                transport.upload_via_webhook,
                file_bytes, filename, content_type, config.webhook_url,
                session=session, timeout=timeout,
            ),
        ),
    ]

    errors: List[BackendError] = []
    for enabled, mode, attempt in attempts:
        if not enabled:
            continue
        try:
            message = attempt()
        except Exception as e:
            logger.warning(f"Discord {mode.value} upload of {filename!r} failed: {_describe(e)}")
            errors.append(BackendError(mode, _describe(e)))
            continue

        descriptor = extract_attachment(message)
        if descriptor is None:
            logger.warning(f"Discord {mode.value} upload of {filename!r} returned no attachment")
            errors.append(BackendError(mode, NO_ATTACHMENT_MESSAGE))
            continue

        logger.info(f"Uploaded {filename!r} via Discord {mode.value} as message {descriptor.message_id}")
        return UploadResult.succeeded(descriptor, mode)

    if not errors:
        logger.error(f"Cannot upload {filename!r}: {NOT_CONFIGURED_MESSAGE}")
        return UploadResult.failed([BackendError(None, NOT_CONFIGURED_MESSAGE)])

    logger.error(f"All Discord backends failed for {filename!r}: {join_errors(errors)}")
    return UploadResult.failed(errors)


def get_discord_file(
    channel_id: Optional[str],
    message_id: str,
    config: DiscordConfig,
    session: Optional[requests.Session] = None,
    timeout: float = transport.DEFAULT_TIMEOUT,
) -> LookupResult:
    """
    Resolve the attachment of a stored message, bot first then webhook.

    A found attachment short-circuits. A 404 (or a message without an
    attachment) is a confirmed absence and the next backend is still asked.
    Transport errors are collected; if nothing was found and any backend
    errored, the result is ``FAILED`` since an outage cannot be told apart
    from a deletion.
    """
    attempts: List[Attempt] = [
        (
            bool(config.bot_token and channel_id),
            BackendMode.BOT,
            partial(
                transport.fetch_message_via_bot,
                channel_id, message_id, config.bot_token,
                session=session, timeout=timeout,
            ),
        ),
        (
            config.webhook_enabled,
            BackendMode.WEBHOOK,
            partial(
                transport.fetch_message_via_webhook,
                message_id, config.webhook_url,
                session=session, timeout=timeout,
            ),
        ),
    ]

    attempted = False
    errors: List[BackendError] = []
    for enabled, mode, attempt in attempts:
        if not enabled:
            continue
        attempted = True
        try:
            message = attempt()
        except Exception as e:
            logger.warning(f"Discord {mode.value} lookup of message {message_id} failed: {_describe(e)}")
            errors.append(BackendError(mode, _describe(e)))
            continue

        descriptor = extract_attachment(message)
        if descriptor is not None:
            return LookupResult(LookupStatus.FOUND, descriptor=descriptor, mode=mode)
        logger.info(f"Discord {mode.value} reports message {message_id} absent")

    if not attempted:
        logger.error(f"Cannot look up message {message_id}: {NOT_CONFIGURED_MESSAGE}")
        return LookupResult(
            LookupStatus.NOT_CONFIGURED,
            errors=[BackendError(None, NOT_CONFIGURED_MESSAGE)],
        )

    if errors:
        return LookupResult(LookupStatus.FAILED, errors=errors)

    return LookupResult(LookupStatus.ABSENT)


def delete_discord_message(
    channel_id: Optional[str],
    message_id: str,
    config: DiscordConfig,
    session: Optional[requests.Session] = None,
    timeout: float = transport.DEFAULT_TIMEOUT,
) -> bool:
    """
    Delete a message (and so its attachment), bot first then webhook.

    Best effort: returns True as soon as one backend reports success, False
    otherwise, including when nothing is configured. Never raises.
    """
    attempts: List[Attempt] = [
        (
            bool(config.bot_token and channel_id),
            BackendMode.BOT,
            partial(
                transport.delete_message_via_bot,
                channel_id, message_id, config.bot_token,
                session=session, timeout=timeout,
            ),
        ),
        (
            config.webhook_enabled,
            BackendMode.WEBHOOK,
            partial(
                transport.delete_message_via_webhook,
                message_id, config.webhook_url,
                session=session, timeout=timeout,
            ),
        ),
    ]

    for enabled, mode, attempt in attempts:
        if not enabled:
            continue
        try:
            if attempt():
                logger.info(f"Deleted Discord message {message_id} via {mode.value}")
                return True
        except Exception as e:
            logger.error(f"Discord {mode.value} delete error for message {message_id}: {_describe(e)}")

    return False


def _probe_bot(config: DiscordConfig, session, timeout) -> ConnectionStatus:
    user = transport.fetch_bot_user(config.bot_token, session=session, timeout=timeout)
    return ConnectionStatus(
        connected=True,
        mode=BackendMode.BOT,
        name=user.get("username"),
        channel_id=config.channel_id,
    )


def _probe_webhook(config: DiscordConfig, session, timeout) -> ConnectionStatus:
    webhook = transport.fetch_webhook_info(config.webhook_url, session=session, timeout=timeout)
    return ConnectionStatus(
        connected=True,
        mode=BackendMode.WEBHOOK,
        name=webhook.get("name"),
        channel_id=webhook.get("channel_id"),
    )


def check_discord_connection(
    config: DiscordConfig,
    session: Optional[requests.Session] = None,
    timeout: float = transport.DEFAULT_TIMEOUT,
) -> ConnectionStatus:
    """
    Probe every configured backend and merge the answers.

    Unlike the other operations there is no short-circuit: both backends are
    probed when both are configured. Probe failures are logged, never raised.
    """
    probes = [
        (bool(config.bot_token), BackendMode.BOT, _probe_bot),
        (config.webhook_enabled, BackendMode.WEBHOOK, _probe_webhook),
    ]

    healthy = {}
    for enabled, mode, probe in probes:
        if not enabled:
            continue
        try:
            healthy[mode] = probe(config, session, timeout)
        except Exception as e:
            logger.warning(f"Discord {mode.value} connection check failed: {_describe(e)}")

    bot = healthy.get(BackendMode.BOT)
    webhook = healthy.get(BackendMode.WEBHOOK)
    if bot and webhook:
        return ConnectionStatus(
            connected=True,
            mode=BackendMode.BOTH,
            name=f"{bot.name} / {webhook.name}",
            channel_id=bot.channel_id or webhook.channel_id,
        )
    if bot:
        return bot
    if webhook:
        return webhook
    return ConnectionStatus(connected=False)
