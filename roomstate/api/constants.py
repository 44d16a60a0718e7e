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

"""Contains constants from the Matrix protocol."""

from typing import Final


class Membership:
    """Represents the membership states of a user in a room."""

    INVITE: Final = "invite"
    JOIN: Final = "join"
    KNOCK: Final = "knock"
    LEAVE: Final = "leave"
    BAN: Final = "ban"
    LIST: Final = frozenset((INVITE, JOIN, KNOCK, LEAVE, BAN))


class EventTypes:
    Member: Final = "m.room.member"
    Create: Final = "m.room.create"
    JoinRules: Final = "m.room.join_rules"
    PowerLevels: Final = "m.room.power_levels"
    CanonicalAlias: Final = "m.room.canonical_alias"
    RoomAvatar: Final = "m.room.avatar"
    Redaction: Final = "m.room.redaction"

    Message: Final = "m.room.message"
    Topic: Final = "m.room.topic"
    Name: Final = "m.room.name"


class EduTypes:
    PRESENCE: Final = "m.presence"
    TYPING: Final = "m.typing"
    RECEIPT: Final = "m.receipt"


class EventContentFields:
    """Fields found in events' content, regardless of type."""

    MEMBERSHIP: Final = "membership"
    MEMBERSHIP_DISPLAYNAME: Final = "displayname"
    MEMBERSHIP_AVATAR_URL: Final = "avatar_url"

    # Used in m.room.power_levels events.
    POWER_LEVELS_USERS: Final = "users"
    POWER_LEVELS_USERS_DEFAULT: Final = "users_default"

    # Used in m.typing EDUs.
    TYPING_USER_IDS: Final = "user_ids"
