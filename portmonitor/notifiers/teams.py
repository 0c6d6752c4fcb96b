from typing import Any, Dict

from .base import WebhookNotifier


class TeamsNotifier(WebhookNotifier):
    """Microsoft Teams connector webhook using a legacy MessageCard."""

    name = "MSTeams"
    COLORS = {"danger": "DF813D", "warning": "FFC000", "good": "2DC72D"}
    TIMEOUT = 3.2
    RETRIES = 2

    def build_payload(self, title: str, body: str, severity: str) -> Dict[str, Any]:
        return {
            "@type": "MessageCard",
            "@context": "https://schema.org/extensions",
            "summary": title,
            "title": title,
            "text": body,
            "themeColor": self.color(severity),
            "sections": [
                {
                    "text": f"Message generated by portmonitor on {self.hostname}",
                    "startGroup": True,
                }
            ],
        }
