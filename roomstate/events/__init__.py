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

import os
from typing import Any, Generic, Literal, Mapping, TypeVar, overload

from immutabledict import immutabledict

from roomstate.api.constants import EventContentFields
from roomstate.types import JsonDict, StateKey

# Whether events should be frozen when they are built. Frozen events cannot be
# modified by accident after they have been folded into a room's state.
USE_FROZEN_DICTS = os.environ.get("ROOMSTATE_USE_FROZEN_DICTS", "0").lower() in (
    "1",
    "true",
    "yes",
    "on",
)


T = TypeVar("T")

_EMPTY_CONTENT: Mapping[str, Any] = immutabledict()


def freeze(o: Any) -> Any:
    """Recursively convert dicts into immutabledicts and lists into tuples."""
    if isinstance(o, immutabledict):
        return o
    if isinstance(o, dict):
        return immutabledict({k: freeze(v) for k, v in o.items()})
    if isinstance(o, list):
        return tuple(freeze(i) for i in o)
    return o


class DictProperty(Generic[T]):
    """An object property which delegates to the `_dict` within its parent object."""

    __slots__ = ["key"]

    def __init__(self, key: str):
        self.key = key

    @overload
    def __get__(
        self, instance: Literal[None], owner: type | None = None
    ) -> "DictProperty":
        ...

    @overload
    def __get__(self, instance: "EventBase", owner: type | None = None) -> T:
        ...

    def __get__(
        self, instance: "EventBase | None", owner: type | None = None
    ) -> "T | DictProperty":
        # if the property is accessed as a class property rather than an instance
        # property, return the property itself rather than the value
        if instance is None:
            return self
        try:
            return instance._dict[self.key]
        except KeyError as e1:
            # Look like a regular attribute error, so that hasattr() works.
            raise AttributeError(
                "'%s' has no '%s' property" % (type(instance), self.key)
            ) from e1.__context__


class EventBase:
    """A room event, as delivered to the room state store.

    Only the fields the store reads are exposed as properties; everything else
    is reachable through `get()`.
    """

    def __init__(self, event_dict: JsonDict):
        self._dict = event_dict

    origin_server_ts: DictProperty[int] = DictProperty("origin_server_ts")
    room_id: DictProperty[str] = DictProperty("room_id")
    sender: DictProperty[str] = DictProperty("sender")
    # Only present on state events: use get_state_key() where it may be absent.
    state_key: DictProperty[str] = DictProperty("state_key")
    type: DictProperty[str] = DictProperty("type")

    @property
    def content(self) -> Mapping[str, Any]:
        """The event content. Missing or non-object content reads as empty."""
        content = self._dict.get("content")
        if not isinstance(content, Mapping):
            return _EMPTY_CONTENT
        return content

    @property
    def event_id(self) -> str | None:
        return self._dict.get("event_id")

    @property
    def membership(self) -> str | None:
        return self.content.get(EventContentFields.MEMBERSHIP)

    def is_state(self) -> bool:
        return self.get_state_key() is not None

    def get_state_key(self) -> str | None:
        """Get the state key of this event, or None if it's not a state event"""
        return self._dict.get("state_key")

    def get_room_id(self) -> str | None:
        """Get the room ID of this event, or None if it was delivered without one"""
        return self._dict.get("room_id")

    def state_slot(self) -> StateKey:
        """The (type, state_key) slot this state event occupies."""
        state_key = self.get_state_key()
        assert state_key is not None, "Not a state event: %r" % (self,)
        return self.type, state_key

    def get(self, key: str, default: Any | None = None) -> Any:
        return self._dict.get(key, default)

    def freeze(self) -> None:
        """'Freeze' the event dict, so it cannot be modified by accident"""

        # this will be a no-op if the event dict is already frozen.
        self._dict = freeze(self._dict)

    def is_frozen(self) -> bool:
        return isinstance(self._dict, immutabledict)

    def __str__(self) -> str:
        return self.__repr__()

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} "
            f"event_id={self.event_id}, "
            f"type={self.get('type')}, "
            f"state_key={self.get('state_key')}"
            ">"
        )


def make_event_from_dict(event_dict: JsonDict, frozen: bool | None = None) -> EventBase:
    """Construct an EventBase from the given event dict

    Args:
        event_dict: the event as a JSON object.
        frozen: whether to freeze the event. Defaults to `USE_FROZEN_DICTS`.
    """
    if frozen is None:
        frozen = USE_FROZEN_DICTS

    event = EventBase(dict(event_dict))
    if frozen:
        event.freeze()
    return event
