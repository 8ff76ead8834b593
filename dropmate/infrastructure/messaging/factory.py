"""
Construction of the outbound messaging gateway. No business logic here.
"""

from __future__ import annotations

from dropmate.infrastructure.config import Settings
from dropmate.infrastructure.messaging.dry_run import DryRunMessagingClient
from dropmate.infrastructure.messaging.gateway import MessagingGateway
from dropmate.infrastructure.messaging.line import LineMessagingClient


def build_messaging_gateway(settings: Settings) -> MessagingGateway:
    if settings.line_dry_run:
        return DryRunMessagingClient()
    return LineMessagingClient(
        access_token=settings.line_channel_access_token,
        api_base_url=settings.line_api_base_url,
        data_api_base_url=settings.line_data_api_base_url,
    )
