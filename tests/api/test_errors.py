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

from roomstate.api.errors import Codes, InvalidArgumentError, RoomStateError

from tests import unittest


class ErrorsTestCase(unittest.TestCase):
    def test_error_dict(self) -> None:
        e = RoomStateError("Something broke")
        self.assertEqual(
            e.error_dict(), {"errcode": Codes.UNKNOWN, "error": "Something broke"}
        )
        self.assertEqual(str(e), "Something broke")

    def test_invalid_argument(self) -> None:
        e = InvalidArgumentError("Not a typing event -> m.room.topic")
        self.assertIsInstance(e, RoomStateError)
        self.assertIsInstance(e, ValueError)
        self.assertEqual(e.errcode, "M_INVALID_PARAM")
