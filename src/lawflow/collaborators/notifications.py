"""Notification sender that only logs.

Email and SMS delivery are vendor concerns (Resend, Twilio, ...). Until one is
wired in, notifications are recorded in the log so workflows stay observable.
"""

from __future__ import annotations

import logging
from typing import Any

from lawflow.workflow.actions import NotificationChannel

logger = logging.getLogger(__name__)


class LoggingNotificationSender:
    def send_notification(self, channel: NotificationChannel, config: dict[str, Any]) -> None:
        logger.info(
            "Notification queued",
            extra={
                "channel": channel,
                "to": config.get("to"),
                "subject": config.get("subject"),
                "template": config.get("template"),
            },
        )

    def notify_team(self, tenant_id: str, config: dict[str, Any]) -> None:
        logger.info(
            "Team notification queued",
            extra={
                "tenant_id": tenant_id,
                "roles": config.get("roles"),
                "team_message": config.get("message"),
            },
        )
