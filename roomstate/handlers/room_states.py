#
# This file is licensed under the Affero General Public License (AGPL) version 3.
#
# Copyright (C) 2025 New Vector, Ltd
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as
# published by the Free Software Foundation, either version 3 of the
# License, or (at your option) any later version.
#
# See the GNU Affero General Public License for more details:
# <https://www.gnu.org/licenses/agpl-3.0.html>.
#
#

import logging
from typing import Iterable, Mapping

from roomstate.api.constants import EduTypes
from roomstate.config.room_state import RoomStateConfig
from roomstate.events import EventBase, make_event_from_dict
from roomstate.state import RoomState
from roomstate.state.members import DisplayNameCalculator
from roomstate.types import JsonDict

logger = logging.getLogger(__name__)


class RoomStateHandler:
    """Tracks a `RoomState` for each room the application knows about.

    All calls must be serialised by the caller, as with `RoomState` itself.
    """

    def __init__(
        self,
        config: RoomStateConfig | None = None,
        display_name_calculator: DisplayNameCalculator | None = None,
    ):
        self._config = config or RoomStateConfig()
        self._display_name_calculator = display_name_calculator

        # room_id -> RoomState
        self._room_states: dict[str, RoomState] = {}

    def has_room(self, room_id: str) -> bool:
        return room_id in self._room_states

    def get_room_ids(self) -> list[str]:
        return list(self._room_states)

    def get_room_state(self, room_id: str) -> RoomState:
        """Get the state of the given room, creating an empty one if needed."""
        room_state = self._room_states.get(room_id)
        if room_state is None:
            logger.debug("Tracking state for new room %s", room_id)
            room_state = RoomState(
                room_id,
                config=self._config,
                display_name_calculator=self._display_name_calculator,
            )
            self._room_states[room_id] = room_state
        return room_state

    def forget_room(self, room_id: str) -> None:
        """Stop tracking the given room. A no-op for unknown rooms."""
        if self._room_states.pop(room_id, None) is not None:
            logger.debug("Forgot state for room %s", room_id)

    def on_state_events(
        self, room_id: str, events: Iterable[EventBase | JsonDict]
    ) -> RoomState:
        """Fold state events into the given room's state, in order.

        Events may be given as `EventBase`s or as JSON dicts; the latter are
        treated as belonging to `room_id` if they don't name a room.
        """
        room_state = self.get_room_state(room_id)
        room_state.set_state_events([_to_event(room_id, e) for e in events])
        return room_state

    def on_typing_event(self, room_id: str, edu: EventBase | JsonDict) -> frozenset[str]:
        """Apply a typing notification to the given room.

        Returns:
            The user IDs which are now typing.

        Raises:
            InvalidArgumentError if `edu` is not an `m.typing` event.
        """
        return self.get_room_state(room_id).set_typing_event(_to_event(room_id, edu))

    def process_sync_room(self, room_id: str, room_json: JsonDict) -> RoomState:
        """Apply a room's section of a client `/sync` response.

        The `state` block is folded first, then the state events found in the
        `timeline` block, in the order the server sent them. Typing
        notifications in the `ephemeral` block are applied afterwards; other
        ephemeral events are ignored.

        The timeline's `prev_batch` token becomes the room's pagination token
        if it doesn't already have one.
        """
        room_state = self.get_room_state(room_id)

        state_events = _get_events(room_json, "state")
        timeline_events = _get_events(room_json, "timeline")
        self.on_state_events(
            room_id,
            state_events + [e for e in timeline_events if "state_key" in e],
        )

        for edu in _get_events(room_json, "ephemeral"):
            if edu.get("type") == EduTypes.TYPING:
                self.on_typing_event(room_id, edu)
            else:
                logger.debug(
                    "Ignoring ephemeral %s event in %s", edu.get("type"), room_id
                )

        timeline = room_json.get("timeline")
        if isinstance(timeline, Mapping) and room_state.pagination_token is None:
            prev_batch = timeline.get("prev_batch")
            if isinstance(prev_batch, str):
                room_state.pagination_token = prev_batch

        return room_state


def _get_events(room_json: JsonDict, block_name: str) -> list[JsonDict]:
    """Pull the list of event dicts out of a block of a sync room section.

    Malformed blocks and entries are dropped with a log line.
    """
    block = room_json.get(block_name)
    if block is None:
        return []

    events = block.get("events") if isinstance(block, Mapping) else None
    if not isinstance(events, list):
        logger.warning("Ignoring malformed %s block in sync response", block_name)
        return []

    return [e for e in events if isinstance(e, Mapping)]


def _to_event(room_id: str, event: EventBase | JsonDict) -> EventBase:
    if isinstance(event, EventBase):
        return event

    event_dict = dict(event)
    # Events in /sync responses don't repeat the room ID.
    event_dict.setdefault("room_id", room_id)
    return make_event_from_dict(event_dict)
