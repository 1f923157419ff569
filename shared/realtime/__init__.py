from .feed import ChangeFeed, change_feed, ADMIN_NOTIFICATIONS_TOPIC, workshop_topic
from .socket import relay
