"""AMQP messaging used by the service to consume work and config events."""

from .client import MessagingClient
from .delivery import Delivery, MessageHandler
from .errors import BrokerConnectionError, SubscriptionError, PublishError

__all__ = [
    'MessagingClient',
    'Delivery',
    'MessageHandler',
    'BrokerConnectionError',
    'SubscriptionError',
    'PublishError'
]
