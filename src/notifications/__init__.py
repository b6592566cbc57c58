from .manager import NotificationManager, compose_message
from .slack import SlackNotification
from .source import DeliverError, NotificationSource
