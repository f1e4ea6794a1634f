import logging

from lmsr_market.engine.events import DEFAULT_CHANNEL, EventChannel, MarketEvent, get_event_channel
from lmsr_market.utils import serialize_record

logger = logging.getLogger(__name__)


def publish_event(event: MarketEvent, channel: str = DEFAULT_CHANNEL) -> None:
    get_event_channel(channel).publish(event)


def log_event(event: MarketEvent) -> None:
    """Subscriber that writes every record to the log as JSON."""
    logger.info(f"{event.type}: {serialize_record(event.to_dict())}")


def attach_event_logger(channel: str = DEFAULT_CHANNEL) -> EventChannel:
    event_channel = get_event_channel(channel)
    event_channel.subscribe(log_event)
    return event_channel
