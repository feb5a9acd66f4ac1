"""
Discord attachment hosting.

Uploads, lookups, deletions and health checks over the bot API with the
webhook as fallback.
"""

from file_host.discord.coordinators import (
    check_discord_connection,
    delete_discord_message,
    get_discord_file,
    upload_to_discord,
)

__all__ = [
    "check_discord_connection",
    "delete_discord_message",
    "get_discord_file",
    "upload_to_discord",
]
