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
from typing import Mapping

from roomstate.api.constants import EduTypes, EventContentFields
from roomstate.api.errors import InvalidArgumentError
from roomstate.events import EventBase
from roomstate.metrics import typing_events_malformed_counter
from roomstate.state.members import RoomMember

logger = logging.getLogger(__name__)


def apply_typing_event(
    members: Mapping[str, RoomMember], event: EventBase
) -> frozenset[str]:
    """Replace the typing status of every member from an `m.typing` event.

    A typing notification lists everyone who is currently typing, so members
    not named in it stop typing. Unknown users in the list are skipped.

    Args:
        members: The room's members, keyed by user ID.
        event: The typing notification.

    Returns:
        The user IDs which are now typing.

    Raises:
        InvalidArgumentError if the event is not a typing notification. No
        member is modified in that case.
    """
    event_type = event.get("type")
    if event_type != EduTypes.TYPING:
        raise InvalidArgumentError("Not a typing event -> %s" % (event_type,))

    for member in members.values():
        member.typing = False

    user_ids = get_typing_user_ids(event)
    if user_ids is None:
        typing_events_malformed_counter.inc()
        return frozenset()

    typing = set()
    for user_id in user_ids:
        member = members.get(user_id)
        if member is None:
            logger.debug("Ignoring typing notification for non-member %s", user_id)
            continue
        member.typing = True
        typing.add(user_id)

    return frozenset(typing)


def get_typing_user_ids(event: EventBase) -> tuple[str, ...] | None:
    """Read the list of typing users from a typing notification.

    Returns:
        The user IDs, or None if the list is malformed.
    """
    user_ids = event.content.get(EventContentFields.TYPING_USER_IDS)
    if not isinstance(user_ids, (list, tuple)) or not all(
        isinstance(user_id, str) for user_id in user_ids
    ):
        logger.warning(
            "Ignoring malformed user_ids in typing notification for %s: %r",
            event.get("room_id"),
            user_ids,
        )
        return None

    return tuple(user_ids)
