import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Dict

import requests

from ..errors import NotificationFailure

logger = logging.getLogger(__name__)


class WebhookNotifier(ABC):
    """
    A chat integration reachable through an incoming webhook URL.
    Subclasses only decide what the JSON payload looks like.
    """

    name = "webhook"
    # severity -> platform specific colour
    COLORS: Dict[str, str] = {}
    DEFAULT_SEVERITY = "danger"
    TIMEOUT = 10
    # Extra attempts after the first failed POST
    RETRIES = 0
    RETRY_DELAY = 2

    def __init__(self, url: str, hostname: str = ""):
        self.url = url
        self.hostname = hostname

    def color(self, severity: str) -> str:
        return self.COLORS.get(severity, self.COLORS.get(self.DEFAULT_SEVERITY, ""))

    @abstractmethod
    def build_payload(self, title: str, body: str, severity: str) -> Dict[str, Any]:
        pass

    def _post(self, payload: Dict[str, Any]) -> None:
        response = requests.post(
            self.url,
            json=payload,
            headers={"Content-Type": "application/json"},
            timeout=self.TIMEOUT
        )
        response.raise_for_status()

    def deliver(self, title: str, body: str, severity: str = DEFAULT_SEVERITY) -> None:
        payload = self.build_payload(title, body, severity)
        attempts = self.RETRIES + 1
        for attempt in range(attempts):
            try:
                self._post(payload)
            except requests.RequestException as e:
                if attempt + 1 >= attempts:
                    raise NotificationFailure(f"Could not send the message to {self.name}: {e}") from e
                logger.warning(
                    "Sending to %s failed (attempt %d/%d): %s", self.name, attempt + 1, attempts, e
                )
                time.sleep(self.RETRY_DELAY)
                continue
            logger.info("Sent the message to %s", self.name)
            return
