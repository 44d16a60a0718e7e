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
from typing import Any, Literal


class MetadataFilter(logging.Filter):
    """Logging filter that adds constant values to each record.

    Values already set on a record, for instance through `extra=`, are left
    alone.

    Args:
        metadata: Key-value pairs to add to each record.
    """

    def __init__(self, metadata: dict[str, Any]):
        super().__init__()
        self._metadata = metadata

    def filter(self, record: logging.LogRecord) -> Literal[True]:
        for key, value in self._metadata.items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
