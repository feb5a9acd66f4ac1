from typing import Any, Dict, Optional

from file_host.discord.models import AttachmentDescriptor


def extract_attachment(message: Optional[Dict[str, Any]]) -> Optional[AttachmentDescriptor]:
    """Return the first attachment of a Discord message, or None if it has none."""
    if not message:
        return None
    attachments = message.get("attachments") or []
    if not attachments:
        return None

    attachment = attachments[0]
    return AttachmentDescriptor(
        url=attachment.get("url"),
        filename=attachment.get("filename"),
        size=attachment.get("size"),
        content_type=attachment.get("content_type"),
        attachment_id=attachment.get("id"),
        channel_id=message.get("channel_id"),
        message_id=message.get("id"),
    )
