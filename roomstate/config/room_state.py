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
from typing import Any

from roomstate.types import JsonDict

from ._base import Config
from ._util import validate_config

logger = logging.getLogger(__name__)

ROOM_STATE_SCHEMA = {
    "type": "object",
    "properties": {
        "disambiguate_display_names": {"type": "boolean"},
        "clamp_power_level_norm": {"type": "boolean"},
    },
    "additionalProperties": False,
}


class RoomStateConfig(Config):
    """Options for how room state stores derive their member records.

    Stores built without a config use the defaults below.
    """

    section = "room_state"

    # Whether members sharing a display name get their user ID appended to it.
    disambiguate_display_names = True

    # Whether power level norms are pinned into [0, 100]. They can only fall
    # outside that range when a power levels event holds negative levels.
    clamp_power_level_norm = False

    def read_config(self, config: JsonDict, **kwargs: Any) -> None:
        room_state_config = config.get("room_state") or {}
        validate_config(ROOM_STATE_SCHEMA, room_state_config, ("room_state",))

        self.disambiguate_display_names = room_state_config.get(
            "disambiguate_display_names", True
        )
        self.clamp_power_level_norm = room_state_config.get(
            "clamp_power_level_norm", False
        )

        if not self.disambiguate_display_names:
            logger.info("Display name disambiguation is disabled")
