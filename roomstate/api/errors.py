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

"""Contains exceptions and error codes."""

import logging
from enum import Enum

from roomstate.types import JsonDict

logger = logging.getLogger(__name__)


class Codes(str, Enum):
    """
    All known error codes, as an enum of strings.
    """

    UNKNOWN = "M_UNKNOWN"
    BAD_JSON = "M_BAD_JSON"
    INVALID_PARAM = "M_INVALID_PARAM"


class RoomStateError(Exception):
    """Base class for errors raised by the room state store.

    Attributes:
        msg: String describing the error.
        errcode: Matrix-style error code for the error.
    """

    def __init__(self, msg: str, errcode: str = Codes.UNKNOWN):
        super().__init__(msg)
        self.msg = msg
        self.errcode = errcode

    def error_dict(self) -> JsonDict:
        return {"errcode": self.errcode, "error": self.msg}


class InvalidArgumentError(RoomStateError, ValueError):
    """A caller passed something which breaks the operation's contract.

    This points at a routing bug in the caller rather than at bad data from a
    remote peer, so it is never swallowed.
    """

    def __init__(self, msg: str, errcode: str = Codes.INVALID_PARAM):
        super().__init__(msg, errcode)
