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
from typing import Any, Sequence, overload

from immutabledict import immutabledict

from roomstate.api.constants import EventTypes
from roomstate.config.room_state import RoomStateConfig
from roomstate.events import EventBase
from roomstate.metrics import (
    OUTCOME_ACCEPTED,
    OUTCOME_NOT_STATE,
    OUTCOME_WRONG_ROOM,
    state_events_folded_counter,
    typing_events_applied_counter,
)
from roomstate.state.displayname import (
    calculate_display_name,
    calculate_plain_display_name,
)
from roomstate.state.members import DisplayNameCalculator, RoomMember
from roomstate.state.power_levels import project_power_level
from roomstate.state.typing import apply_typing_event
from roomstate.types import StateMap

logger = logging.getLogger(__name__)

POWER_KEY = (EventTypes.PowerLevels, "")


class _NoStateKey:
    """Marker for get_state_events being called without a state key.

    `None` can't be used for this as it would be confused with a lookup of
    a missing key.
    """


_NO_STATE_KEY: Any = _NoStateKey()


class RoomState:
    """The current state of a single room, built by folding state events.

    Each (type, state_key) slot holds the most recently folded event for it.
    Member records are derived from `m.room.member` events and kept in step
    with the current `m.room.power_levels` event. Typing notifications only
    touch the members' `typing` flag and are never stored as state.

    Not thread safe: callers must serialise all calls into a given instance.

    Args:
        room_id: The room this state belongs to. Events for other rooms are
            ignored.
        config: Options for deriving member records.
        display_name_calculator: Works out the name to show for each member.
            Defaults to the calculator picked by `config`.
    """

    def __init__(
        self,
        room_id: str,
        config: RoomStateConfig | None = None,
        display_name_calculator: DisplayNameCalculator | None = None,
    ):
        self._room_id = room_id
        self._config = config or RoomStateConfig()

        if display_name_calculator is None:
            if self._config.disambiguate_display_names:
                display_name_calculator = calculate_display_name
            else:
                display_name_calculator = calculate_plain_display_name
        self._calculate_display_name = display_name_calculator

        # user_id -> RoomMember
        self.members: dict[str, RoomMember] = {}
        # event type -> state_key -> event
        self.state_events: dict[str, dict[str, EventBase]] = {}
        # Opaque token for paginating backwards, managed by the caller.
        self.pagination_token: str | None = None

        # Event types with derived effects beyond updating the index.
        self._state_event_handlers = {
            EventTypes.Member: self._on_member_event,
            EventTypes.PowerLevels: self._on_power_levels_event,
        }

    @property
    def room_id(self) -> str:
        return self._room_id

    def get_members(self) -> list[RoomMember]:
        """Get all the members of this room."""
        return list(self.members.values())

    def get_member(self, user_id: str) -> RoomMember | None:
        return self.members.get(user_id)

    @overload
    def get_state_events(self, event_type: str) -> list[EventBase]:
        ...

    @overload
    def get_state_events(self, event_type: str, state_key: str) -> EventBase | None:
        ...

    def get_state_events(
        self, event_type: str, state_key: str = _NO_STATE_KEY
    ) -> list[EventBase] | EventBase | None:
        """Get state events from the state of the room.

        Args:
            event_type: The type of the state events.
            state_key: If given, only return the event in that slot.

        Returns:
            If `state_key` was not given, a list of all the current events of
            that type (which may be empty). Otherwise the event at that slot,
            or None if there is none.
        """
        events_by_key = self.state_events.get(event_type, {})
        if state_key is _NO_STATE_KEY:
            return list(events_by_key.values())
        return events_by_key.get(state_key)

    def get_power_levels_event(self) -> EventBase | None:
        return self.get_state_events(*POWER_KEY)

    def get_state_map(self) -> StateMap[EventBase]:
        """A read-only snapshot of the state, keyed by (type, state_key)."""
        return immutabledict(
            {
                (event_type, state_key): event
                for event_type, events_by_key in self.state_events.items()
                for state_key, event in events_by_key.items()
            }
        )

    def set_state_events(self, state_events: Sequence[EventBase]) -> None:
        """Fold the given state events into the state of the room, in order.

        Each event replaces whatever is in its (type, state_key) slot. Events
        for other rooms, and events which aren't state events, are skipped.

        Args:
            state_events: The events, in the order they should be applied.
        """
        for event in state_events:
            if event.get_room_id() != self._room_id:
                logger.debug(
                    "Ignoring %s for room %s in state of %s",
                    event,
                    event.get_room_id(),
                    self._room_id,
                )
                state_events_folded_counter.labels(OUTCOME_WRONG_ROOM).inc()
                continue

            if not event.is_state():
                logger.debug("Ignoring non-state event %s in %s", event, self._room_id)
                state_events_folded_counter.labels(OUTCOME_NOT_STATE).inc()
                continue

            event_type, state_key = event.state_slot()
            self.state_events.setdefault(event_type, {})[state_key] = event
            state_events_folded_counter.labels(OUTCOME_ACCEPTED).inc()

            handler = self._state_event_handlers.get(event_type)
            if handler is not None:
                handler(event)

    def set_typing_event(self, event: EventBase) -> frozenset[str]:
        """Set the current typing notification for this room.

        Returns:
            The user IDs which are now typing.

        Raises:
            InvalidArgumentError if the event is not an `m.typing` event.
        """
        typing = apply_typing_event(self.members, event)
        typing_events_applied_counter.inc()
        logger.debug("Typing in %s: %s", self._room_id, sorted(typing))
        return typing

    def _on_member_event(self, event: EventBase) -> None:
        user_id = event.state_key
        member = self.members.get(user_id)
        if member is None:
            member = RoomMember(room_id=self._room_id, user_id=user_id)

        member.set_membership_event(event, self, self._calculate_display_name)
        self.members[user_id] = member

        # The member may already have a power level.
        power_levels_event = self.get_power_levels_event()
        if power_levels_event is not None:
            self._set_power_level(power_levels_event, member)

    def _on_power_levels_event(self, event: EventBase) -> None:
        for member in self.members.values():
            self._set_power_level(event, member)

    def _set_power_level(self, event: EventBase, member: RoomMember) -> None:
        project_power_level(
            event, member, clamp_norm=self._config.clamp_power_level_norm
        )
