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
import os
from typing import Any, ClassVar, Iterator

import yaml

from roomstate.types import JsonDict

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Represents a problem parsing the configuration

    Args:
        msg: A textual description of the error.
        path: Where appropriate, an indication of where in the configuration
           the problem lies.
    """

    def __init__(self, msg: str, path: list[str] | None = None):
        self.msg = msg
        self.path = path


def format_config_error(e: ConfigError) -> Iterator[str]:
    """
    Formats a config error neatly

    The idea is to format the immediate error, plus the "causes" of those errors,
    hopefully in a way that makes sense to the user.
    """
    yield "Error in configuration"

    if e.path:
        yield " at '%s'" % (".".join(e.path),)

    yield ":\n  %s" % (e.msg,)

    parent_e = e.__cause__
    indent = 1
    while parent_e:
        indent += 1
        yield ":\n%s%s" % ("  " * indent, str(parent_e))
        parent_e = parent_e.__cause__


class Config:
    """
    A configuration section, containing configuration keys and values.

    Attributes:
        section: The section title of this config object, such as
            "room_state". This is used as the attribute name on the root
            config.
    """

    section: ClassVar[str]

    def __init__(self, root_config: "RootConfig | None" = None):
        self.root = root_config

    def read_config(self, config: JsonDict, **kwargs: Any) -> None:
        """Read the relevant options out of the top-level config dict."""
        raise NotImplementedError()


class RootConfig:
    """
    Holder of an application's configuration.

    Each of the classes in `config_classes` is instantiated and exposed as
    an attribute named after its `section`.
    """

    config_classes: list[type[Config]] = []

    def __init__(self) -> None:
        for config_class in self.config_classes:
            if not getattr(config_class, "section", None):
                raise ValueError("%r requires a section name" % (config_class,))

            try:
                conf = config_class(self)
            except Exception as e:
                raise Exception("Failed making %s: %r" % (config_class.section, e))
            setattr(self, config_class.section, conf)

    def invoke_all(self, func_name: str, *args: Any, **kwargs: Any) -> None:
        """Invoke a function on all instantiated config objects this RootConfig
        is configured to use.
        """
        for config_class in self.config_classes:
            getattr(getattr(self, config_class.section), func_name)(*args, **kwargs)

    def parse_config_dict(self, config_dict: JsonDict, config_dir_path: str = "") -> None:
        """Read the information from the config dict into this Config object.

        Args:
            config_dict: Configuration data, as read from the yaml
            config_dir_path: The path where the config files are kept. Used
                to resolve relative paths.
        """
        self.invoke_all("read_config", config_dict, config_dir_path=config_dir_path)

    @classmethod
    def load_config(cls, config_path: str) -> "RootConfig":
        """Parse the given yaml config file into a config object.

        Raises:
            ConfigError if the file can't be read or is invalid.
        """
        config_dict = read_config_file(config_path)
        obj = cls()
        config_dir_path = os.path.dirname(os.path.abspath(config_path))
        obj.parse_config_dict(config_dict, config_dir_path=config_dir_path)
        return obj


def read_config_file(file_path: str) -> JsonDict:
    """Read a yaml config file, checking that it holds a mapping."""
    try:
        with open(file_path) as file_stream:
            config_dict = yaml.safe_load(file_stream)
    except OSError as e:
        raise ConfigError("Unable to read config file %s" % (file_path,)) from e
    except yaml.YAMLError as e:
        raise ConfigError("Unable to parse config file %s" % (file_path,)) from e

    if config_dict is None:
        config_dict = {}

    if not isinstance(config_dict, dict):
        raise ConfigError(
            "File %s is empty or doesn't parse into a key-value map." % (file_path,)
        )

    logger.debug("Loaded config from %s", file_path)
    return config_dict
