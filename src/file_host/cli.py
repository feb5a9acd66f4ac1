# cli.py
import logging

import click

from file_host.config.settings import get_settings
from file_host.services.files import FileService

logger = logging.getLogger(__name__)


def _service() -> FileService:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    return FileService.from_settings(settings)


@click.group()
def cli():
    """CLI commands for the file host"""
    pass


@cli.command()
def show_config():
    """Show current configuration"""
    settings = get_settings()
    config = settings.discord_config

    print("Current Configuration:")
    print(f"  Discord Bot: {'enabled' if config.bot_token else 'disabled'}")
    print(f"  Discord Channel ID: {config.channel_id}")
    print(f"  Discord Webhook: {'enabled' if config.webhook_enabled else 'disabled'}")
    print(f"  R2 Bucket: {settings.r2_bucket_name}")
    print(f"  R2 Endpoint: {settings.r2_endpoint_url}")
    print(f"  Metadata DB: {settings.metadata_db_path}")


@cli.command()
def check_connection():
    """Probe every configured Discord backend"""
    status = _service().connection_status()
    if status.connected:
        print(f"✅ Connected via {status.mode.value}: {status.name} (channel {status.channel_id})")
    else:
        print("❌ Discord is not reachable with the configured credentials")
        raise SystemExit(1)


@cli.command()
@click.argument("file_id")
def purge(file_id):
    """Delete a file's bucket object and metadata record"""
    result = _service().delete_file(file_id)
    if result.success:
        print(f"✅ Deleted {result.file_id}")
    else:
        print(f"❌ Delete failed: {result.error}")
        raise SystemExit(1)


@cli.command()
@click.argument("channel_id")
@click.argument("message_id")
def delete_message(channel_id, message_id):
    """Delete a Discord message, bot first then webhook"""
    if _service().delete_message(channel_id, message_id):
        print(f"✅ Deleted message {message_id}")
    else:
        print(f"❌ Could not delete message {message_id}")
        raise SystemExit(1)


if __name__ == "__main__":
    cli()
