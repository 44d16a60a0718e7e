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
import logging.config
import sys
from typing import Any

from roomstate.logging.filter import MetadataFilter
from roomstate.types import JsonDict

from ._base import Config, ConfigError, read_config_file

DEFAULT_LOG_FORMAT = (
    "%(asctime)s - %(instance)s - %(name)s - %(lineno)d - %(levelname)s - %(message)s"
)

DEFAULT_LOG_CONFIG = """\
# Log configuration for roomstate.
#
# This is a YAML file containing a standard Python logging configuration
# dictionary. See [1] for details on the valid settings.
#
# [1]: https://docs.python.org/3/library/logging.config.html#configuration-dictionary-schema

version: 1

formatters:
    precise:
        format: '%(asctime)s - %(name)s - %(lineno)d - %(levelname)s - %(message)s'

handlers:
    console:
        class: logging.StreamHandler
        formatter: precise

loggers:
    roomstate:
        level: INFO

root:
    level: INFO
    handlers: [console]

disable_existing_loggers: false
"""


class LoggingConfig(Config):
    section = "logging"

    def read_config(self, config: JsonDict, **kwargs: Any) -> None:
        self.log_config = config.get("log_config")
        if self.log_config is not None and not isinstance(self.log_config, str):
            raise ConfigError("log_config must be a path", ["log_config"])

        self.instance_name = config.get("instance_name", "roomstate")
        if not isinstance(self.instance_name, str):
            raise ConfigError("instance_name must be a string", ["instance_name"])

    def generate_files(self, log_config_path: str) -> None:
        """Write out a default log config to the given path."""
        with open(log_config_path, "w") as log_config_file:
            log_config_file.write(DEFAULT_LOG_CONFIG)


def setup_logging(log_config: LoggingConfig) -> None:
    """Set up the python logging system from the config.

    If a log config file is configured it is applied with `dictConfig`;
    otherwise everything at INFO and above goes to stderr.
    """
    root_logger = logging.getLogger("")

    if log_config.log_config is None:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        handler.addFilter(MetadataFilter({"instance": log_config.instance_name}))
        root_logger.addHandler(handler)
        root_logger.setLevel(logging.INFO)
    else:
        log_config_dict = read_config_file(log_config.log_config)
        try:
            logging.config.dictConfig(log_config_dict)
        except (ValueError, TypeError, AttributeError, ImportError) as e:
            raise ConfigError(
                "Invalid log config %s" % (log_config.log_config,), ["log_config"]
            ) from e

        # Let formats from the file refer to %(instance)s as well.
        for handler in root_logger.handlers:
            handler.addFilter(MetadataFilter({"instance": log_config.instance_name}))

    logging.getLogger(__name__).info("Logging set up for %s", log_config.instance_name)
