from .base import WebhookNotifier
from .registry import NotifierRegistry
from .slack import SlackNotifier
from .teams import TeamsNotifier

__all__ = ["WebhookNotifier", "NotifierRegistry", "SlackNotifier", "TeamsNotifier"]
