"""
Dispatch incoming webhook events to the handlers registered for them.
"""

import logging
from collections import defaultdict
from typing import Callable, Dict, List, Tuple

logger = logging.getLogger(__name__)

# A handler gets the parsed webhook payload, and returns a Flask response.
Handler = Callable[[Dict], object]


class EventHandlerRegistry:
    """
    Handlers keyed by GitHub event type and action.

    The event type is from the ``X-GitHub-Event`` header, the action is the
    "action" key of the payload.
    """

    def __init__(self):
        self.handlers: Dict[Tuple[str, str], List[Handler]] = defaultdict(list)

    def register(self, event_type: str, action: str, handler: Handler) -> None:
        self.handlers[(event_type, action)].append(handler)

    def register_note_event_handler(self, handler: Handler) -> None:
        """Register a handler for newly created comments on issues and pull requests."""
        self.register("issue_comment", "created", handler)

    def handlers_for(self, event_type: str, action: str) -> List[Handler]:
        return self.handlers.get((event_type, action), [])

    def dispatch(self, event_type: str, event: Dict) -> list:
        """
        Run the handlers for an event, in registration order.

        Returns the list of handler results, empty if no handler wanted it.
        """
        action = event.get("action", "")
        results = []
        for handler in self.handlers_for(event_type, action):
            logger.info(f"dispatching {handler.__name__} for {event_type=}, {action=}")
            results.append(handler(event))
        return results
