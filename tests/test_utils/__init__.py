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

"""
Utilities for running the unit tests
"""
from typing import Any

from roomstate.api.constants import EduTypes, EventTypes, Membership
from roomstate.events import EventBase, make_event_from_dict
from roomstate.types import JsonDict

ROOM_ID = "!room:example.com"
OTHER_ROOM_ID = "!other:example.com"

ALICE = "@alice:example.com"
BOB = "@bob:example.com"
CHARLIE = "@charlie:example.com"

_next_event_id = 0


def _gen_event_id() -> str:
    global _next_event_id
    _next_event_id += 1
    return "$event%d" % (_next_event_id,)


def make_state_event(
    event_type: str,
    state_key: str,
    content: JsonDict | None = None,
    room_id: str = ROOM_ID,
    **kwargs: Any,
) -> EventBase:
    """Build a state event for tests."""
    event_dict = {
        "event_id": _gen_event_id(),
        "type": event_type,
        "state_key": state_key,
        "room_id": room_id,
        "sender": kwargs.pop("sender", state_key or ALICE),
        "content": content if content is not None else {},
    }
    event_dict.update(kwargs)
    return make_event_from_dict(event_dict)


def make_member_event(
    user_id: str,
    membership: str = Membership.JOIN,
    displayname: str | None = None,
    room_id: str = ROOM_ID,
) -> EventBase:
    content: JsonDict = {"membership": membership}
    if displayname is not None:
        content["displayname"] = displayname
    return make_state_event(EventTypes.Member, user_id, content, room_id=room_id)


def make_power_levels_event(
    users: Any = None, users_default: Any = None, room_id: str = ROOM_ID
) -> EventBase:
    content: JsonDict = {}
    if users is not None:
        content["users"] = users
    if users_default is not None:
        content["users_default"] = users_default
    return make_state_event(EventTypes.PowerLevels, "", content, room_id=room_id)


def make_typing_event(
    user_ids: Any, room_id: str = ROOM_ID, event_type: str = EduTypes.TYPING
) -> EventBase:
    return make_event_from_dict(
        {"type": event_type, "room_id": room_id, "content": {"user_ids": user_ids}}
    )
