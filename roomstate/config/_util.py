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


from typing import Any, Iterable

import jsonschema
from jsonschema.exceptions import best_match

from roomstate.config._base import ConfigError
from roomstate.types import JsonDict


def validate_config(
    json_schema: JsonDict, config: Any, config_path: Iterable[str]
) -> None:
    """Check one config section against its schema.

    When the section has several problems, only the most relevant one (as
    ranked by `best_match`) is reported.

    Raises:
        ConfigError naming the offending option, rooted at `config_path`.
    """
    validator = jsonschema.Draft7Validator(json_schema)
    error = best_match(validator.iter_errors(config))
    if error is not None:
        raise ConfigError(error.message, _option_path(config_path, error))


def _option_path(
    section_path: Iterable[str], error: jsonschema.ValidationError
) -> list[str]:
    # List indices render as "<item N>".
    return [*section_path] + [
        "<item %i>" % p if isinstance(p, int) else str(p)
        for p in error.absolute_path
    ]
