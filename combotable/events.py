"""Custom pygame events used by the combotable client."""

from __future__ import annotations

import pygame

# Reserve a block of user events for the client.
USER_EVENT_BASE = pygame.USEREVENT + 1
INTENT_EMITTED = USER_EVENT_BASE + 0
SNAPSHOT_RECEIVED = USER_EVENT_BASE + 1
