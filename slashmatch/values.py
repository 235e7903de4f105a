r"""
Slashmatch option values: kinds, snowflakes, and the value codec.

Overview
- OptionKind: the closed set of node kinds found in an interaction option tree.
  • grouping kinds carry children only: COMMAND (the root, never sent as an
    option type), SUBCOMMAND, SUBCOMMAND_GROUP.
  • leaf kinds carry a value: STRING, INTEGER, BOOLEAN, NUMBER, and the referent
    kinds USER, CHANNEL, ROLE, MENTIONABLE, ATTACHMENT.
  • numeric values match the platform's option type ids (1..11).

- Snowflake: an immutable, opaque 64-bit id tagged with its referent kind.

- decode(kind, raw, minimum, maximum, *, name): the single translation boundary
  between loosely-typed wire scalars and typed values.

Decoded variants
- STRING      → str
- INTEGER     → int   (JSON integer only; bools, floats and strings are rejected)
- NUMBER      → float (JSON integer or float; bools and strings are rejected)
- BOOLEAN     → bool
- referents   → Snowflake (string-encoded unsigned 64-bit integer)

Failures
- TypeMismatchError: the wire shape does not match the declared kind.
- OutOfRangeError: outside the declared bounds, or outside 64 bits for integers.
- MalformedIdError: a referent value that is not a decimal 64-bit id.

Quick example:
    >>> decode(OptionKind.INTEGER, 42)
    42
    >>> decode(OptionKind.USER, "80351110224678912")
    snowflake(id=80351110224678912, kind=user)
"""
import math
import re
from datetime import datetime, timezone
from enum import IntEnum
from typing import final

from .faults import TypeMismatchError, OutOfRangeError, MalformedIdError, FaultCode, getdoc
from .utils import Unset

# Platform epoch (2015-01-01T00:00:00Z) in milliseconds; snowflakes count from it.
EPOCH = 1420070400000

INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1
UINT64_MAX = 2 ** 64 - 1


class OptionKind(IntEnum):
    """
    node kinds of an interaction option tree (platform option type ids).

    COMMAND is not an option type on the wire; it tags the root node, which
    behaves like a subcommand (it carries either options or one child).
    """
    COMMAND             = 0
    SUBCOMMAND          = 1
    SUBCOMMAND_GROUP    = 2
    STRING              = 3
    INTEGER             = 4
    BOOLEAN             = 5
    USER                = 6
    CHANNEL             = 7
    ROLE                = 8
    MENTIONABLE         = 9
    NUMBER              = 10
    ATTACHMENT          = 11

    @property
    def grouping(self):
        """True for kinds that carry children instead of a value."""
        return self in (OptionKind.COMMAND, OptionKind.SUBCOMMAND, OptionKind.SUBCOMMAND_GROUP)

    @property
    def referent(self):
        """True for kinds whose value is a snowflake."""
        return self in (
            OptionKind.USER,
            OptionKind.CHANNEL,
            OptionKind.ROLE,
            OptionKind.MENTIONABLE,
            OptionKind.ATTACHMENT,
        )

    @property
    def label(self):
        return self.name.lower().replace("_", " ")

    @property
    def variant(self):
        """The Python type of decoded values of this kind (None for grouping kinds)."""
        if self.grouping:
            return None
        if self.referent:
            return Snowflake
        return {
            OptionKind.STRING: str,
            OptionKind.INTEGER: int,
            OptionKind.BOOLEAN: bool,
            OptionKind.NUMBER: float,
        }[self]


@final
class Snowflake:
    """
    Opaque 64-bit platform identifier, tagged with the kind of its referent.

    Characteristics
    - Immutable: attributes cannot be set after construction.
    - Not an int: int(snowflake) gives the id, but isinstance(snowflake, int) is False,
      so an id is never mistaken for an INTEGER option.
    - Equality and hashing use both the id and the kind.
    """
    __slots__ = ("_id", "_kind")

    def __new__(cls, id, kind, /):
        if isinstance(id, bool) or not isinstance(id, int):
            raise TypeError("snowflake 'id' must be an integer")
        if not 0 <= id <= UINT64_MAX:
            raise ValueError("snowflake 'id' must fit in an unsigned 64-bit integer")
        if not (kind := OptionKind(kind)).referent:
            raise ValueError(f"snowflake 'kind' must be a referent kind, not {kind.label!r}")
        self = super().__new__(cls)
        object.__setattr__(self, "_id", id)
        object.__setattr__(self, "_kind", kind)
        return self

    @property
    def id(self):
        return self._id

    @property
    def kind(self):
        return self._kind

    @property
    def created_at(self):
        """
        UTC creation time encoded in the upper 42 bits of the id.
        """
        return datetime.fromtimestamp(((self._id >> 22) + EPOCH) / 1000, tz=timezone.utc)

    @property
    def mention(self):
        """
        Chat markup for users, channels and roles; None for other referents.
        """
        match self._kind:
            case OptionKind.USER:
                return f"<@{self._id}>"
            case OptionKind.CHANNEL:
                return f"<#{self._id}>"
            case OptionKind.ROLE:
                return f"<@&{self._id}>"
        return None

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__.lower()} objects are immutable")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__.lower()} objects are immutable")

    def __int__(self):
        return self._id

    def __str__(self):
        return str(self._id)

    def __eq__(self, other, /):
        if not isinstance(other, Snowflake):
            return NotImplemented
        return (self._id, self._kind) == (other._id, other._kind)

    def __hash__(self):
        return hash((self._id, self._kind))

    def __repr__(self):
        return f"snowflake(id={self._id}, kind={self._kind.label})"

    def __rich_repr__(self):
        yield "id", self._id
        yield "kind", self._kind.label

    def __reduce__(self):
        return type(self), (self._id, self._kind)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'Snowflake' is not an acceptable base type")


def _found(raw):
    """Human label for the wire shape of a raw scalar."""
    match raw:
        case None:
            return "null"
        case bool():
            return "a boolean"
        case int():
            return "an integer"
        case float():
            return "a number"
        case str():
            return "a string"
        case list() | tuple():
            return "a list"
        case dict():
            return "an object"
    return "a %s" % type(raw).__name__


def _subject(name):
    return "option %r" % name if name else "option value"


def _mismatch(kind, raw, name, expected):
    return TypeMismatchError(
        "%s expects %s but got %s" % (_subject(name), expected, _found(raw)),
        hint="send %s for this %s option" % (expected, kind.label),
        name=name,
        kind=kind,
        value=raw,
        expected=kind.variant,
        found=type(raw),
        docs=getdoc(FaultCode.TYPE_MISMATCH),
    )


def _bounded(kind, value, raw, name, minimum, maximum):
    """Check declared bounds; bounds are inclusive and optional."""
    below = minimum is not None and minimum is not Unset and value < minimum
    above = maximum is not None and maximum is not Unset and value > maximum
    if not (below or above):
        return value

    if below and maximum in (None, Unset):
        expected = "at least %s" % minimum
    elif above and minimum in (None, Unset):
        expected = "at most %s" % maximum
    else:
        expected = "between %s and %s" % (minimum, maximum)

    raise OutOfRangeError(
        "%s must be %s but got %s" % (_subject(name), expected, raw),
        hint="pick a value %s" % expected,
        name=name,
        kind=kind,
        value=raw,
        minimum=minimum,
        maximum=maximum,
        docs=getdoc(FaultCode.OUT_OF_RANGE),
    )


def decode(kind, raw, /, minimum=None, maximum=None, *, name=None):
    """
    Decode a raw wire scalar into the typed value for `kind`.

    Parameters
    - kind: OptionKind | int
      Declared leaf kind (grouping kinds are rejected with TypeError).
    - raw: Any
      The scalar as delivered by the payload layer (str, int, float, bool, ...).
    - minimum / maximum: int | float | None
      Inclusive bounds for INTEGER and NUMBER, supplied by the schema.
    - name: str | None
      Option name, attached to any fault for attribution.

    Returns
    - str | int | float | bool | Snowflake

    Raises
    - TypeMismatchError, OutOfRangeError, MalformedIdError (all DecodeError).

    Notes
    - Pure: no state is read or written besides the arguments.
    """
    kind = OptionKind(kind)
    if kind.grouping:
        raise TypeError(f"decode() cannot decode a {kind.label} node")

    match kind:
        case OptionKind.STRING:
            if not isinstance(raw, str):
                raise _mismatch(kind, raw, name, "a string")
            return raw

        case OptionKind.BOOLEAN:
            if not isinstance(raw, bool):
                raise _mismatch(kind, raw, name, "a boolean")
            return raw

        case OptionKind.INTEGER:
            # bool is an int subclass; a JSON `true` is never an integer.
            if isinstance(raw, bool) or not isinstance(raw, int):
                raise _mismatch(kind, raw, name, "a whole number")
            value = _bounded(kind, int(raw), raw, name, INT64_MIN, INT64_MAX)
            return _bounded(kind, value, raw, name, minimum, maximum)

        case OptionKind.NUMBER:
            if isinstance(raw, bool) or not isinstance(raw, int | float):
                raise _mismatch(kind, raw, name, "a number")
            try:
                value = float(raw)
            except OverflowError:
                value = math.inf if raw > 0 else -math.inf
            if not math.isfinite(value):
                raise OutOfRangeError(
                    "%s must be a finite number but got %s" % (_subject(name), raw),
                    hint="pick a finite number",
                    name=name,
                    kind=kind,
                    value=raw,
                    minimum=minimum,
                    maximum=maximum,
                    docs=getdoc(FaultCode.OUT_OF_RANGE),
                )
            return _bounded(kind, value, raw, name, minimum, maximum)

    # Referent kinds: an unsigned decimal string within 64 bits.
    if not isinstance(raw, str) or not re.fullmatch(r"[0-9]{1,20}", raw) or int(raw) > UINT64_MAX:
        raise MalformedIdError(
            "%s expects a %s id but got %s" % (_subject(name), kind.label, repr(raw) if isinstance(raw, str) else _found(raw)),
            hint="ids are sent as decimal strings, e.g. '80351110224678912'",
            name=name,
            kind=kind,
            value=raw,
            docs=getdoc(FaultCode.MALFORMED_ID),
        )
    return Snowflake(int(raw), kind)


__all__ = (
    "OptionKind",
    "Snowflake",
    "decode",
)
