import time
from typing import Any, Dict

from .base import WebhookNotifier


class SlackNotifier(WebhookNotifier):
    """Slack incoming webhook with a single coloured attachment."""

    name = "Slack"
    COLORS = {"danger": "danger", "warning": "warning", "good": "good"}

    def build_payload(self, title: str, body: str, severity: str) -> Dict[str, Any]:
        return {
            "username": "portmonitor",
            "icon_emoji": ":star:",
            "attachments": [
                {
                    "title": title,
                    "text": body,
                    "author_name": "@portmonitor",
                    "footer": "Port Monitor Message",
                    "color": self.color(severity),
                    "ts": int(time.time()),
                }
            ],
        }
