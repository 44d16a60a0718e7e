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
from typing import TYPE_CHECKING, Callable

import attr

from roomstate.api.constants import EventContentFields
from roomstate.events import EventBase

if TYPE_CHECKING:
    from roomstate.state import RoomState

logger = logging.getLogger(__name__)

# Given a membership event and the room state it is being folded into, returns
# the name to show for the member.
DisplayNameCalculator = Callable[[EventBase, "RoomState"], str]


@attr.s(slots=True, auto_attribs=True)
class RoomMember:
    """The derived view of a single user in a room.

    Records are created when the first `m.room.member` event for the user is
    folded and are then updated in place; leaving a room is a membership
    change, not a removal.

    room_id: The room this member belongs to.
    user_id: The user ID, which is the state key of the member event.
    membership: The membership of the user, see Membership.
    member_event: The most recently folded `m.room.member` event for the user.
    name: The display name to show for the user, disambiguated if need be.
    raw_display_name: The `displayname` from the member event, or the user ID.
    typing: Whether the user was named in the last typing notification.
    power_level: The user's power level.
    power_level_norm: The power level as a percentage of the highest level in
        the room.
    """

    room_id: str
    user_id: str
    membership: str | None = None
    member_event: EventBase | None = None
    name: str = attr.ib(
        default=attr.Factory(lambda self: self.user_id, takes_self=True)
    )
    raw_display_name: str = attr.ib(
        default=attr.Factory(lambda self: self.user_id, takes_self=True)
    )
    typing: bool = False
    power_level: int = 0
    power_level_norm: float = 0

    def set_membership_event(
        self,
        event: EventBase,
        room_state: "RoomState",
        calculate_display_name: DisplayNameCalculator,
    ) -> None:
        """Refresh this member from a newly folded `m.room.member` event.

        Args:
            event: The membership event; its state key must be this user.
            room_state: The state the event is being folded into.
            calculate_display_name: Works out the name to show for the member.
        """
        if event.get_state_key() != self.user_id:
            raise ValueError(
                "Member event for %s applied to %s"
                % (event.get_state_key(), self.user_id)
            )

        self.member_event = event
        self.membership = event.membership
        self.raw_display_name = calculate_raw_display_name(event)
        self.name = calculate_display_name(event, room_state)

        logger.debug(
            "Member %s in %s is now %r (%s)",
            self.user_id,
            self.room_id,
            self.name,
            self.membership,
        )


def calculate_raw_display_name(event: EventBase) -> str:
    """The `displayname` set in a member event, falling back to the user ID."""
    displayname = event.content.get(EventContentFields.MEMBERSHIP_DISPLAYNAME)
    if isinstance(displayname, str) and displayname.strip():
        return displayname
    return event.get_state_key() or ""
