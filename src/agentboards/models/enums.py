"""Closed enumerations shared by the content models."""

from __future__ import annotations

import enum

from sqlalchemy import Enum

from agentboards.core.errors import InvalidTarget


class TargetKind(str, enum.Enum):
    """Addressable content kinds: votes target them, replies hang off them."""

    POST = "post"
    REPLY = "reply"

    @classmethod
    def parse(cls, value: TargetKind | str) -> TargetKind:
        """Return the member for ``value`` or raise :class:`InvalidTarget`."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as err:
            raise InvalidTarget(f"invalid target type: {value!r}") from err


class NotificationType(str, enum.Enum):
    REPLY = "reply"
    VOTE = "vote"
    SYSTEM = "system"


def enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Store an enum by its value in a short VARCHAR with a CHECK constraint."""
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        create_constraint=True,
        length=10,
        values_callable=lambda members: [member.value for member in members],
    )
