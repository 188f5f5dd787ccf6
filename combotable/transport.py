"""Channels that carry intents to the authoritative server."""

from __future__ import annotations

import json
import sys
from typing import Any, Mapping, Protocol, TextIO

import pygame

from .errors import TransportUnavailable
from .events import INTENT_EMITTED
from .logging_utils import get_logger

_log = get_logger(__name__)


class Transport(Protocol):
    """One-way handoff of an intent; raises TransportUnavailable when down."""

    def send(self, event: str, payload: Mapping[str, Any]) -> None: ...


class JsonLinesTransport:
    """Write each intent as one JSON object per line on a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream if stream is not None else sys.stdout

    def send(self, event: str, payload: Mapping[str, Any]) -> None:
        line = json.dumps({"event": event, "payload": dict(payload)}, separators=(",", ":"))
        try:
            self.stream.write(line + "\n")
            self.stream.flush()
        except (OSError, ValueError) as exc:
            raise TransportUnavailable(f"Cannot write intent {event}: {exc}") from exc
        _log.debug("[JSONL][OUT] %s", line)


class PygameEventTransport:
    """Post each intent on the pygame event queue as an ``INTENT_EMITTED`` event.

    Whatever owns the network connection picks the events up from the queue.
    """

    def __init__(self, event_type: int = INTENT_EMITTED) -> None:
        self.event_type = event_type

    def send(self, event: str, payload: Mapping[str, Any]) -> None:
        try:
            posted = pygame.event.post(
                pygame.event.Event(self.event_type, name=event, payload=dict(payload))
            )
        except pygame.error as exc:
            raise TransportUnavailable(f"Event queue unavailable: {exc}") from exc
        if posted is False:
            raise TransportUnavailable(f"Event type {self.event_type} is blocked")
