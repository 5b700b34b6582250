"""
Host message handling.

An embedding application forwards messages of the form
``{"command": "generate", "text": "..."}``. Each one is parsed and rendered
with a fresh builder, and the outcome is reported through a single
``notify`` callback.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

from .builder import DiagramBuilder, RenderSummary, render_graph
from .parser import Parser

logger = logging.getLogger(__name__)

GENERATE_COMMAND = "generate"
SUCCESS_MESSAGE = "Screen flow generated successfully!"
ERROR_PREFIX = "Error generating screen flow: "
UNKNOWN_ERROR = "Unknown error"


@dataclass
class Notification:
    """A user-visible message sent back to the host."""

    message: str
    error: bool = False


class FlowHost:
    """
    Dispatches host messages to the parse-then-render pipeline.

    Args:
        builder_factory: Called once per generate command for a new builder.
        notify: Receives one Notification per generate command.
    """

    def __init__(
        self,
        builder_factory: Callable[[], DiagramBuilder],
        notify: Callable[[Notification], Any],
    ):
        self.builder_factory = builder_factory
        self.notify = notify
        self.parser = Parser()

    async def handle(self, message: Mapping[str, Any]) -> Optional[RenderSummary]:
        """
        Handle one inbound message.

        Returns:
            The RenderSummary for a successful generate command, else None.
        """
        command = message.get("command")
        if command != GENERATE_COMMAND:
            logger.debug("Ignoring host command %r", command)
            return None

        text = message.get("text") or ""
        try:
            graph = self.parser.parse(text)
            summary = await render_graph(graph, self.builder_factory())
        except Exception as exc:
            logger.exception("Screen flow generation failed")
            self.notify(Notification(ERROR_PREFIX + describe_error(exc), error=True))
            return None

        self.notify(Notification(SUCCESS_MESSAGE))
        return summary


def describe_error(exc: BaseException) -> str:
    """Human-readable description of a failure, with a generic fallback."""
    return str(exc).strip() or UNKNOWN_ERROR
