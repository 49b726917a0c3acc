"""Channel adapter registry: pluggable notification dispatch channels.

Provides singleton access to channel adapters. The email channel uses the
fake adapter by default; set ``EMAIL_ADAPTER=resend`` (with
``RESEND_API_KEY``) to deliver through Resend.
"""

import os

from notifications.notification.notification import NotificationChannel

_channel_instances: dict[str, object] = {}


def _build_email_adapter():
    if os.environ.get("EMAIL_ADAPTER", "fake").lower() == "resend":
        from notifications.channel.resend_email import ResendEmailAdapter

        return ResendEmailAdapter(api_key=os.environ.get("RESEND_API_KEY", ""))

    from notifications.channel.fake_email import FakeEmailAdapter

    return FakeEmailAdapter()


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: One of NotificationChannel enum values
    """
    if channel_type not in _channel_instances:
        if channel_type == NotificationChannel.EMAIL.value:
            _channel_instances[channel_type] = _build_email_adapter()
        else:
            raise ValueError(f"Unknown channel type: {channel_type}")

    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    """Override the adapter for a channel (useful for tests)."""
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
