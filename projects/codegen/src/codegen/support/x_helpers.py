"""Nullable column wrappers and query helpers shared by generated models.

A nullable column is never represented by ``None`` alone: each wrapper pairs
the value with an explicit ``valid`` flag, so an SQL NULL and a zero value
(``0``, ``""``, ``b""``) survive database and JSON round trips unchanged.

    NullString("")      # valid empty string, encodes to ""
    NullString()        # SQL NULL, encodes to null
"""

from __future__ import annotations

import base64
import json
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta
from typing import Any, ClassVar, Protocol, Self


class Cursor(Protocol):
    """The subset of a DB-API cursor used by generated models."""

    lastrowid: Any
    rowcount: int

    def execute(self, query: str, args: Sequence[Any] = ...) -> Any: ...  # noqa: ANN401, D102

    def fetchone(self) -> Sequence[Any] | None: ...  # noqa: D102

    def fetchall(self) -> Sequence[Sequence[Any]]: ...  # noqa: D102

    def close(self) -> None: ...  # noqa: D102


class Querier(Protocol):
    """A DB-API connection.

    Model methods only ask for a cursor, so they can be used inside or
    outside a transaction the caller manages.
    """

    def cursor(self) -> Cursor: ...  # noqa: D102


def quote_identifier(name: str) -> str:
    """Quote an identifier with backticks."""
    return "`" + name.replace("`", "``") + "`"


def build_select(columns: Iterable[str]) -> str:
    """Turn column names into a select list, e.g. "`id`, `name`"."""
    return ", ".join(quote_identifier(column) for column in columns)


class Nullable[T]:
    """A value paired with an explicit validity flag."""

    __slots__ = ("valid", "value")

    zero: ClassVar[Any] = None

    def __init__(self, value: T | None = None, valid: bool | None = None) -> None:  # noqa: FBT001
        """Wrap a value; omitting it (or passing None) produces a NULL."""
        self.value: T = self.zero if value is None else value
        self.valid: bool = value is not None if valid is None else valid

    def __eq__(self, other: object) -> bool:
        """Compare validity and, for valid wrappers, the value."""
        if type(other) is not type(self):
            return NotImplemented
        if not self.valid:
            return not other.valid  # type: ignore[attr-defined]
        return other.valid and self.value == other.value  # type: ignore[attr-defined]

    def __hash__(self) -> int:
        """Hash consistently with equality."""
        return hash((type(self), self.valid, self.value if self.valid else None))

    def __repr__(self) -> str:
        """Show the value, or NULL."""
        inner = repr(self.value) if self.valid else "NULL"
        return f"{type(self).__name__}({inner})"

    @classmethod
    def coerce(cls, src: Any) -> T:  # noqa: ANN401
        """Convert a driver value into the wrapped type."""
        return src

    @classmethod
    def encode_json(cls, value: T) -> Any:  # noqa: ANN401
        """Convert a valid value into a JSON-compatible object."""
        return value

    @classmethod
    def decode_json(cls, data: Any) -> T:  # noqa: ANN401
        """Convert a decoded JSON object into the wrapped type."""
        return cls.coerce(data)

    @classmethod
    def from_db(cls, src: Any) -> Self:  # noqa: ANN401
        """Wrap a value read from the database."""
        if src is None:
            return cls()
        return cls(cls.coerce(src))

    def to_db(self) -> Any:  # noqa: ANN401
        """Return the value to bind as a query argument."""
        return self.value if self.valid else None

    def to_json(self) -> str:
        """Encode as JSON, using null for an invalid value."""
        return json.dumps(self.encode_json(self.value) if self.valid else None)

    @classmethod
    def from_json(cls, data: str | bytes) -> Self:
        """Decode from JSON; null produces an invalid wrapper."""
        decoded = json.loads(data)
        if decoded is None:
            return cls()
        return cls(cls.decode_json(decoded))


class NullInt64(Nullable[int]):
    """Nullable integer."""

    zero = 0

    @classmethod
    def coerce(cls, src: Any) -> int:  # noqa: ANN401, D102
        return int(src)


class NullFloat64(Nullable[float]):
    """Nullable floating point number."""

    zero = 0.0

    @classmethod
    def coerce(cls, src: Any) -> float:  # noqa: ANN401, D102
        return float(src)


class NullBool(Nullable[bool]):
    """Nullable boolean, stored as TINYINT(1) or BIT(1)."""

    zero = False

    @classmethod
    def coerce(cls, src: Any) -> bool:  # noqa: ANN401, D102
        if isinstance(src, bytes):
            return src != b"\x00"
        return bool(src)


class NullString(Nullable[str]):
    """Nullable string."""

    zero = ""

    @classmethod
    def coerce(cls, src: Any) -> str:  # noqa: ANN401, D102
        if isinstance(src, bytes | bytearray):
            return bytes(src).decode()
        return str(src)


class NullTime(Nullable[datetime]):
    """Nullable timestamp, encoded as ISO 8601 in JSON."""

    zero = datetime.min

    @classmethod
    def coerce(cls, src: Any) -> datetime:  # noqa: ANN401, D102
        match src:
            case datetime():
                return src
            case date():
                return datetime.combine(src, datetime.min.time())
            case timedelta():
                # TIME columns arrive as durations
                return datetime.min + src
            case _:
                return datetime.fromisoformat(str(src))

    @classmethod
    def encode_json(cls, value: datetime) -> str:  # noqa: D102
        return value.isoformat()


class NullBytes(Nullable[bytes]):
    """Nullable binary value, encoded as base64 in JSON."""

    zero = b""

    @classmethod
    def coerce(cls, src: Any) -> bytes:  # noqa: ANN401, D102
        if isinstance(src, str):
            return src.encode()
        return bytes(src)

    @classmethod
    def encode_json(cls, value: bytes) -> str:  # noqa: D102
        return base64.b64encode(value).decode("ascii")

    @classmethod
    def decode_json(cls, data: Any) -> bytes:  # noqa: ANN401, D102
        return base64.b64decode(data)


class NullJSON(Nullable[Any]):
    """Nullable JSON document, kept opaque as decoded Python objects."""

    @classmethod
    def coerce(cls, src: Any) -> Any:  # noqa: ANN401, D102
        if isinstance(src, str | bytes | bytearray):
            return json.loads(src)
        return src

    @classmethod
    def decode_json(cls, data: Any) -> Any:  # noqa: ANN401, D102
        return data

    def to_db(self) -> str | None:  # noqa: D102
        return json.dumps(self.value) if self.valid else None
