"""Property-list value nodes: the scalar types and their common base."""

from __future__ import annotations

import copy
import enum
import operator
from datetime import datetime, timedelta, timezone
from typing import Any, ClassVar, Optional

_UINT64_MAX = (1 << 64) - 1
_INT64_MIN = -(1 << 63)
APPLE_EPOCH = datetime(2001, 1, 1)


class PlistType(enum.Enum):
    """Kinds of nodes a property list can hold."""

    BOOLEAN = 0
    INT = 1
    REAL = 2
    STRING = 3
    ARRAY = 4
    DICT = 5
    DATE = 6
    DATA = 7
    KEY = 8
    UID = 9
    NULL = 10
    NONE = 11


class Node:
    """Base of every property-list node: a typed value with an optional parent."""

    type: ClassVar[PlistType] = PlistType.NONE
    _default: ClassVar[Any] = None

    def __init__(self, value: Any = None, parent: Optional[Node] = None) -> None:
        self.parent = parent
        self.value = self._default if value is None else value

    @property
    def value(self) -> Any:
        return self._value

    @value.setter
    def value(self, new_value: Any) -> None:
        self._value = self._coerce(new_value)

    @classmethod
    def _coerce(cls, value: Any) -> Any:
        return value

    def clone(self) -> Node:
        """Return an independent deep copy of this node that has no parent."""
        parent, self.parent = self.parent, None
        try:
            return copy.deepcopy(self)
        finally:
            self.parent = parent

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._value!r})"


class Null(Node):
    """The null value."""

    type = PlistType.NULL

    @classmethod
    def _coerce(cls, value: Any) -> None:
        if value is not None:
            raise ValueError("a Null node holds no value")
        return None


class Boolean(Node):
    """A true or false value."""

    type = PlistType.BOOLEAN
    _default = False

    @classmethod
    def _coerce(cls, value: Any) -> bool:
        return bool(value)


class Integer(Node):
    """A signed 64-bit or unsigned 64-bit integer."""

    type = PlistType.INT
    _default = 0

    @classmethod
    def _coerce(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise TypeError("an Integer node does not take a bool")
        number = operator.index(value)
        if not _INT64_MIN <= number <= _UINT64_MAX:
            raise ValueError(f"integer {number} does not fit in 64 bits")
        return number

    @property
    def unsigned_value(self) -> int:
        """The value read as an unsigned 64-bit number."""
        return self._value & _UINT64_MAX

    def is_negative(self) -> bool:
        return self._value < 0


class Real(Node):
    """A floating point number."""

    type = PlistType.REAL
    _default = 0.0

    @classmethod
    def _coerce(cls, value: Any) -> float:
        if isinstance(value, (str, bytes)):
            raise TypeError("a Real node takes a number")
        return float(value)


class String(Node):
    """A text string."""

    type = PlistType.STRING
    _default = ""

    @classmethod
    def _coerce(cls, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeError("a string node takes a str")
        return value


class Key(String):
    """A dictionary key."""

    type = PlistType.KEY


class Uid(Node):
    """An unsigned object identifier."""

    type = PlistType.UID
    _default = 0

    @classmethod
    def _coerce(cls, value: Any) -> int:
        if isinstance(value, bool):
            raise TypeError("a Uid node does not take a bool")
        number = operator.index(value)
        if not 0 <= number <= _UINT64_MAX:
            raise ValueError(f"uid {number} is not an unsigned 64-bit number")
        return number


class Data(Node):
    """A block of raw bytes."""

    type = PlistType.DATA
    _default = b""

    @classmethod
    def _coerce(cls, value: Any) -> bytes:
        if isinstance(value, str):
            raise TypeError("a Data node takes bytes, not str")
        return bytes(value)


class Date(Node):
    """A point in time, held as seconds since 2001-01-01 00:00:00 UTC."""

    type = PlistType.DATE
    _default = 0.0

    @classmethod
    def _coerce(cls, value: Any) -> float:
        if isinstance(value, (str, bytes, datetime)):
            raise TypeError("a Date node takes seconds; use Date.from_datetime")
        return float(value)

    def to_datetime(self) -> datetime:
        """Return the date as a naive datetime in UTC."""
        try:
            return APPLE_EPOCH + timedelta(seconds=self._value)
        except OverflowError as exc:
            raise ValueError(f"date {self._value} is out of range") from exc

    @classmethod
    def from_datetime(cls, value: datetime) -> Date:
        """Build a Date from a datetime; a naive datetime is taken as UTC."""
        if not isinstance(value, datetime):
            raise ValueError("Expected a datetime")
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        delta = value - APPLE_EPOCH
        seconds = delta.days * 86400 + delta.seconds + delta.microseconds / 1_000_000
        return cls(seconds)