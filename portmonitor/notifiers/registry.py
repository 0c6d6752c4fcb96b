import logging
from typing import List, Optional

from ..errors import NotificationFailure
from .base import WebhookNotifier
from .slack import SlackNotifier
from .teams import TeamsNotifier

logger = logging.getLogger(__name__)


class NotifierRegistry:
    def __init__(self, notifiers: Optional[List[WebhookNotifier]] = None):
        self.notifiers: List[WebhookNotifier] = list(notifiers or [])

    @classmethod
    def from_plan(cls, plan, hostname: str = "") -> "NotifierRegistry":
        """
        Registers one sink per configured webhook URL (zero, one or two).
        """
        notifiers = []
        if plan.notify_target:
            notifiers.append(SlackNotifier(plan.notify_target, hostname))
        if plan.teams_target:
            notifiers.append(TeamsNotifier(plan.teams_target, hostname))
        return cls(notifiers)

    def __len__(self) -> int:
        return len(self.notifiers)

    def deliver(self, title: str, body: str, severity: str = "danger") -> int:
        """
        Sends to every sink. Failures are logged and do not stop the others.
        """
        delivered = 0
        for notifier in self.notifiers:
            logger.info("Send message to: %s", notifier.name)
            try:
                notifier.deliver(title, body, severity)
            except NotificationFailure as e:
                logger.error("%s", e)
                continue
            delivered += 1
        return delivered
