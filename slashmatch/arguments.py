r"""
Slashmatch option specifications.

Overview
- Option: the declared shape of one leaf option at one command path: its name,
  its kind, whether the platform marks it required, and optional numeric bounds.
  Option.decode(raw) runs the value codec with the declared kind and bounds.

- Introspection & representation
  • ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes selected
    fields via read-only properties declared in __introspectable__/__displayable__.

Metadata (sanitized on construction)
- name: str, 1 to 32 characters of letters, digits, '-' or '_', lowercase.
- kind: OptionKind | int, must be a leaf kind (subcommands are paths, not options).
- required: bool, informative only: absence is observed by ArgumentMatch accessors.
- min_value / max_value: Unset | int | float, INTEGER and NUMBER only; min <= max.
- descr: Unset | str, non-empty when provided.

Quick example:
    >>> from slashmatch.arguments import Option
    >>> attendees = Option("attendees", OptionKind.INTEGER, required=True, min_value=1)
    >>> attendees.decode(5)
    5
"""
import functools
import operator
import re
from collections.abc import Mapping

from .utils import *
from .values import OptionKind, decode


class ArgumentType(type):
    """
    Metaclass that turns specs into introspectable, read-only descriptors.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations for
      diagnostics.
    - Expose selected fields as read-only properties using mirror() for all
      names listed in __introspectable__.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__;
      otherwise __introspectable__ is used.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - option(name='title', kind='string', required=True, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                object = getattr(self, name)
                yield name, object.label if isinstance(object, OptionKind) else object
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate option metadata in place.

    Raises
    - TypeError: wrong types (non-string name, non-numeric bounds, bounds on a
      non-numeric kind, grouping kind).
    - ValueError: malformed name, unknown kind id, empty descr, min above max.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"[-\w]{1,32}", name := name.strip()):
        raise ValueError(f"{cls.__typename__} 'name' must be 1-32 letters, digits, '-' or '_'")
    elif name != name.lower():
        raise ValueError(f"{cls.__typename__} 'name' must be lowercase")
    metadata["name"] = name

    if isinstance(kind := metadata["kind"], bool) or not isinstance(kind, int):
        raise TypeError(f"{cls.__typename__} 'kind' must be an option kind")
    if (kind := OptionKind(kind)).grouping:
        raise TypeError(f"{cls.__typename__} 'kind' cannot be a {kind.label}; declare it as a command path")
    metadata["kind"] = kind

    for bound in ("min_value", "max_value"):
        if (object := metadata[bound]) is Unset:
            continue
        if kind not in (OptionKind.INTEGER, OptionKind.NUMBER):
            raise TypeError(f"{cls.__typename__} {bound!r} only applies to integer and number options")
        if isinstance(object, bool) or not isinstance(object, int | float):
            raise TypeError(f"{cls.__typename__} {bound!r} must be a number")

    minimum, maximum = metadata["min_value"], metadata["max_value"]
    if minimum is not Unset and maximum is not Unset and minimum > maximum:
        raise ValueError(f"{cls.__typename__} 'min_value' cannot exceed 'max_value'")

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = descr


class Option(metaclass=ArgumentType):
    """
    Leaf option specification.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes
      on instances, mirroring the sanitized metadata values. Unset bounds and
      descr read as None.
    """

    __introspectable__ = (
        "name",
        "kind",
        "required",
        "min_value",
        "max_value",
        "descr",
    )

    __displayable__ = (
        "name",
        "kind",
        "required",
        "min_value",
        "max_value",
    )

    def __new__(
            cls,
            name,
            kind,
            /,
            required=False,
            min_value=Unset,
            max_value=Unset,
            descr=Unset,
    ):
        """
        Construct an Option spec with the provided metadata.

        Parameters
        - name: str
          Option name as sent by the platform (unique among its siblings).
        - kind: OptionKind | int
          Leaf kind; the codec decodes incoming values with it.
        - required: bool
          Whether the platform requires the option.
        - min_value / max_value: Unset | int | float
          Inclusive bounds for INTEGER and NUMBER options.
        - descr: Unset | str
          Short description. If Unset, becomes None.
        """
        metadata = {
            "name": name,
            "kind": kind,
            "required": bool(required),
            "min_value": min_value,
            "max_value": max_value,
            "descr": descr,
        }
        _sanitize_metadata(cls, metadata)

        self = super().__new__(cls)
        for name, object in metadata.items():
            setattr(self, "_" + name, coalesce(object))
        return self

    def __eq__(self, other, /):
        if not isinstance(other, Option):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__introspectable__)

    def __hash__(self):
        return hash(tuple(getattr(self, name) for name in type(self).__introspectable__))

    def decode(self, raw, /):
        """
        Decode a raw wire value with this option's kind and bounds.

        Raises
        - DecodeError subclasses, attributed to this option's name.
        """
        return decode(self._kind, raw, self._min_value, self._max_value, name=self._name)

    @classmethod
    def from_payload(cls, entry, /):
        """
        Build an Option from one registration-payload option entry.

        Reads `name`, `type`, `required`, `min_value`, `max_value` and
        `description`; absent keys fall back to the constructor defaults.
        """
        if not isinstance(entry, Mapping):
            raise TypeError(f"{cls.__typename__} payload entry must be a mapping")
        try:
            name, kind = entry["name"], entry["type"]
        except KeyError as error:
            raise ValueError(f"{cls.__typename__} payload entry is missing {error.args[0]!r}") from None
        return cls(
            name,
            kind,
            required=entry.get("required", False),
            min_value=Unset if entry.get("min_value") is None else entry["min_value"],
            max_value=Unset if entry.get("max_value") is None else entry["max_value"],
            descr=entry.get("description") or Unset,
        )


__all__ = (
    "Option",
)
