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

"""Works out what name to show for each member of a room.

The naming rules follow the Matrix client-server API: a member is shown by
the `displayname` in their member event, or their user ID if they have none.
When another joined or invited member shares that display name, the user ID
is appended to tell them apart.
"""

import logging
from typing import TYPE_CHECKING

from roomstate.api.constants import Membership
from roomstate.events import EventBase
from roomstate.state.members import calculate_raw_display_name

if TYPE_CHECKING:
    from roomstate.state import RoomState

logger = logging.getLogger(__name__)

# Members in these states can be confused with each other in the member list.
_VISIBLE_MEMBERSHIPS = frozenset((Membership.JOIN, Membership.INVITE))


def calculate_display_name(event: EventBase, room_state: "RoomState") -> str:
    """The name to show for the member described by `event`, disambiguated
    against the other members of `room_state`.
    """
    user_id = event.get_state_key() or ""
    display_name = calculate_raw_display_name(event)
    if display_name == user_id:
        return user_id

    if _is_display_name_shared(user_id, display_name, room_state):
        logger.debug(
            "Display name %r of %s is shared in %s",
            display_name,
            user_id,
            room_state.room_id,
        )
        return "%s (%s)" % (display_name, user_id)

    return display_name


def calculate_plain_display_name(event: EventBase, room_state: "RoomState") -> str:
    """The name to show for a member, without disambiguation."""
    return calculate_raw_display_name(event)


def _is_display_name_shared(
    user_id: str, display_name: str, room_state: "RoomState"
) -> bool:
    for member in room_state.get_members():
        if member.user_id == user_id:
            continue
        if member.membership not in _VISIBLE_MEMBERSHIPS:
            continue
        if member.raw_display_name == display_name:
            return True
    return False
