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

import attr
from immutabledict import immutabledict

from roomstate.api.constants import EventContentFields
from roomstate.events import EventBase
from roomstate.state.members import RoomMember

logger = logging.getLogger(__name__)


@attr.s(slots=True, frozen=True, auto_attribs=True)
class PowerLevels:
    """The user levels from an `m.room.power_levels` event.

    users_default: The level of users not listed in `users`.
    users: Explicit levels, keyed by user ID.
    """

    users_default: int = 0
    users: Mapping[str, int] = attr.Factory(immutabledict)

    @classmethod
    def from_event(cls, event: EventBase) -> "PowerLevels":
        """Read the user levels from a power levels event.

        Entries with the wrong shape are dropped rather than rejected, since
        remote servers may send malformed content.
        """
        content = event.content

        users_default = content.get(EventContentFields.POWER_LEVELS_USERS_DEFAULT, 0)
        if not _is_level(users_default):
            logger.debug(
                "Ignoring malformed users_default %r in %s", users_default, event
            )
            users_default = 0

        raw_users = content.get(EventContentFields.POWER_LEVELS_USERS, {})
        if not isinstance(raw_users, Mapping):
            logger.debug("Ignoring malformed users %r in %s", raw_users, event)
            raw_users = {}

        users = {}
        for user_id, level in raw_users.items():
            if not _is_level(level):
                logger.debug(
                    "Ignoring malformed level %r for %s in %s", level, user_id, event
                )
                continue
            users[user_id] = level

        return cls(users_default=users_default, users=immutabledict(users))

    @property
    def max_level(self) -> int:
        """The highest level any user in the room can have."""
        return max([self.users_default, *self.users.values()])

    def get_user_level(self, user_id: str) -> int:
        level = self.users.get(user_id)
        if level is None:
            level = self.users_default
        return level


def _is_level(value: object) -> bool:
    # bools are ints too, but not valid power levels
    return isinstance(value, int) and not isinstance(value, bool)


def project_power_level(
    power_levels_event: EventBase, member: RoomMember, clamp_norm: bool = False
) -> None:
    """Set `power_level` and `power_level_norm` on the given member.

    The norm is the member's level as a percentage of the highest level in the
    room. It is 0 when no level in the room is positive.

    Args:
        power_levels_event: The current `m.room.power_levels` event.
        member: The member to update.
        clamp_norm: Whether to pin the norm into [0, 100]. Only negative
            levels can take it out of that range.
    """
    power_levels = PowerLevels.from_event(power_levels_event)
    max_level = power_levels.max_level

    member.power_level = power_levels.get_user_level(member.user_id)

    norm: float = 0
    if max_level > 0:
        norm = (member.power_level * 100) / max_level
        if clamp_norm:
            norm = min(max(norm, 0), 100)
    member.power_level_norm = norm
