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

import yaml

from roomstate.config._base import ConfigError, format_config_error
from roomstate.config.logger import LoggingConfig, setup_logging
from roomstate.config.room_state import RoomStateConfig
from roomstate.config.store import StoreConfig

from tests import unittest


class RoomStateConfigTestCase(unittest.TestCase):
    def test_defaults(self) -> None:
        config = RoomStateConfig()
        config.read_config({})

        self.assertTrue(config.disambiguate_display_names)
        self.assertFalse(config.clamp_power_level_norm)

    def test_read_config(self) -> None:
        config = RoomStateConfig()
        config.read_config(
            {
                "room_state": {
                    "disambiguate_display_names": False,
                    "clamp_power_level_norm": True,
                }
            }
        )

        self.assertFalse(config.disambiguate_display_names)
        self.assertTrue(config.clamp_power_level_norm)

    def test_invalid_value(self) -> None:
        config = RoomStateConfig()
        with self.assertRaises(ConfigError) as cm:
            config.read_config({"room_state": {"clamp_power_level_norm": "yes"}})

        self.assertEqual(cm.exception.path, ["room_state", "clamp_power_level_norm"])

    def test_several_invalid_values(self) -> None:
        """Only one problem is reported, rooted at the section."""
        with self.assertRaises(ConfigError) as cm:
            RoomStateConfig().read_config(
                {
                    "room_state": {
                        "clamp_power_level_norm": "yes",
                        "disambiguate_display_names": 1,
                    }
                }
            )

        self.assertEqual(len(cm.exception.path), 2)
        self.assertEqual(cm.exception.path[0], "room_state")
        self.assertIn(
            cm.exception.path[1],
            ("clamp_power_level_norm", "disambiguate_display_names"),
        )

    def test_unknown_option(self) -> None:
        with self.assertRaises(ConfigError):
            RoomStateConfig().read_config({"room_state": {"colour": "blue"}})


class StoreConfigTestCase(unittest.TestCase):
    def _write_config(self, config: object) -> str:
        path = self.mktemp()
        with open(path, "w") as f:
            yaml.safe_dump(config, f)
        return path

    def test_load_config(self) -> None:
        path = self._write_config(
            {
                "room_state": {"disambiguate_display_names": False},
                "instance_name": "client1",
            }
        )

        config = StoreConfig.load_config(path)

        assert isinstance(config, StoreConfig)
        self.assertFalse(config.room_state.disambiguate_display_names)
        self.assertEqual(config.logging.instance_name, "client1")
        self.assertIsNone(config.logging.log_config)

    def test_empty_config(self) -> None:
        path = self.mktemp()
        with open(path, "w"):
            pass

        config = StoreConfig.load_config(path)

        assert isinstance(config, StoreConfig)
        self.assertTrue(config.room_state.disambiguate_display_names)

    def test_not_a_mapping(self) -> None:
        path = self._write_config(["a", "b"])
        with self.assertRaises(ConfigError):
            StoreConfig.load_config(path)

    def test_missing_file(self) -> None:
        with self.assertRaises(ConfigError) as cm:
            StoreConfig.load_config(self.mktemp())
        self.assertIsInstance(cm.exception.__cause__, OSError)

    def test_format_config_error(self) -> None:
        e = ConfigError("bad value", ["room_state", "clamp_power_level_norm"])
        self.assertEqual(
            "".join(format_config_error(e)),
            "Error in configuration at 'room_state.clamp_power_level_norm':\n"
            "  bad value",
        )


class LoggingConfigTestCase(unittest.TestCase):
    def setUp(self) -> None:
        root_logger = logging.getLogger("")
        handlers = list(root_logger.handlers)
        level = root_logger.level
        roomstate_logger = logging.getLogger("roomstate")
        roomstate_level = roomstate_logger.level

        def restore() -> None:
            root_logger.handlers = handlers
            root_logger.setLevel(level)
            roomstate_logger.setLevel(roomstate_level)

        self.addCleanup(restore)

    def test_bad_log_config(self) -> None:
        with self.assertRaises(ConfigError):
            LoggingConfig().read_config({"log_config": 1})

    def test_default_logging(self) -> None:
        config = LoggingConfig()
        config.read_config({"instance_name": "client1"})

        setup_logging(config)

        root_logger = logging.getLogger("")
        self.assertEqual(root_logger.level, logging.INFO)
        self.assertIsInstance(root_logger.handlers[-1], logging.StreamHandler)

    def test_log_config_file(self) -> None:
        config = LoggingConfig()
        log_config_path = self.mktemp()
        config.read_config({"log_config": log_config_path})
        config.generate_files(log_config_path)

        setup_logging(config)

        self.assertEqual(logging.getLogger("roomstate").level, logging.INFO)
