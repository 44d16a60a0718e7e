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

"""A derived, queryable view of a Matrix room's current state."""

import sys

# Check that we're not running on an unsupported Python version.
py_version = sys.version_info
if py_version < (3, 10):
    print("roomstate requires Python 3.10 or above.")
    sys.exit(1)

__version__ = "0.3.0"
