"""
Realtime Pub/Sub
================
In-process topic channels. Subscribers get a cancellable handle; publishers
fan a `{type, data}` message out to every handler on the channel.
Delivery is at-most-once with no ordering guarantee across channels.
"""

import asyncio
import inspect
import logging
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Union

logger = logging.getLogger(__name__)

Message = Dict[str, Any]
Handler = Callable[[Message], Union[None, Awaitable[None]]]


class RealtimeError(Exception):
    """Publishing to a channel failed."""


class Subscription:
    """Handle returned by `RealtimeHub.subscribe`. Cancel exactly once on teardown."""

    def __init__(self, hub: "RealtimeHub", channel: str, handler: Handler):
        self.hub = hub
        self.channel = channel
        self.handler = handler
        self.active = True

    def cancel(self) -> bool:
        """Detach the handler. Returns False if already cancelled."""
        if not self.active:
            return False
        self.active = False
        self.hub._remove(self)
        return True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.cancel()


class RealtimeHub:
    """Channel name -> ordered list of subscriptions."""

    def __init__(self):
        self.channels: Dict[str, List[Subscription]] = defaultdict(list)

    def subscribe(self, channel: str, handler: Handler) -> Subscription:
        subscription = Subscription(self, channel, handler)
        # copy-on-write: an in-flight publish iterates its own snapshot
        self.channels[channel] = self.channels[channel] + [subscription]
        logger.debug("Subscribed to %s (%d subscribers)", channel, len(self.channels[channel]))
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        remaining = [s for s in self.channels.get(subscription.channel, []) if s is not subscription]
        if remaining:
            self.channels[subscription.channel] = remaining
        else:
            self.channels.pop(subscription.channel, None)
        logger.debug("Unsubscribed from %s (%d subscribers)", subscription.channel, len(remaining))

    async def publish(self, channel: str, event_type: str, payload: Any) -> int:
        """Deliver to current subscribers. Returns the number of handlers reached."""
        if not channel or not event_type:
            raise RealtimeError("Channel and event type are required")

        message = {"type": event_type, "data": payload}
        delivered = 0
        for subscription in self.channels.get(channel, []):
            if not subscription.active:
                continue
            try:
                result = subscription.handler(message)
                if inspect.isawaitable(result):
                    await result
                delivered += 1
            except asyncio.CancelledError:
                raise
            except Exception as e:
                # remaining subscribers still get the message
                logger.warning("Handler on %s failed for %s: %s", channel, event_type, e)
        return delivered

    def subscriber_count(self, channel: str) -> int:
        return len(self.channels.get(channel, []))
