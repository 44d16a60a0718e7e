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

from prometheus_client import Counter

# Outcomes for events passed to RoomState.set_state_events.
OUTCOME_ACCEPTED = "accepted"
OUTCOME_WRONG_ROOM = "wrong_room"
OUTCOME_NOT_STATE = "not_state"

state_events_folded_counter = Counter(
    "roomstate_state_events_folded",
    "Number of events passed to a room state store, by outcome",
    labelnames=["outcome"],
)
"""Number of events passed to a room state store, by outcome"""

typing_events_applied_counter = Counter(
    "roomstate_typing_events_applied",
    "Number of typing notifications applied to a room state store",
)
"""Number of typing notifications applied to a room state store"""

typing_events_malformed_counter = Counter(
    "roomstate_typing_events_malformed",
    "Number of typing notifications whose user list was ignored as malformed",
)
"""Number of typing notifications whose user list was ignored as malformed"""
