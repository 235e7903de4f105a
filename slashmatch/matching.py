"""
Slashmatch matching layer: walk an interaction tree into a path and an argument map.

What this module provides
- CommandPath: the 1 to 3 names selecting a command (`event`, `event create`,
  `admin event create`). Behaves as a tuple; str() joins the names with spaces.
- ArgumentMatch: the immutable, name-indexed map of decoded leaf values, with
  early-exit accessors (`required`, `optional`, `has`) and resolved-entity lookup.
- Entity: a resolved user/member/role/channel/attachment for a snowflake option.
- walk(root, schema): the tree walker; validates the tree shape, resolves the
  path, decodes every leaf with the schema's declared kind and bounds.

Walk rules
- Descend while the current node has exactly one grouping child; a COMMAND root
  may hold a SUBCOMMAND_GROUP or a SUBCOMMAND, a group holds SUBCOMMANDs only,
  and a SUBCOMMAND holds leaves only.
- Zero children under a SUBCOMMAND_GROUP → IncompleteInteractionError.
- Two or more grouping children → AmbiguousInteractionError.
- Grouping and leaf siblings mixed, a fourth level, or misplaced kinds
  → SchemaViolationError.
- The resolved path must be a terminal path of the schema; a path the schema only
  knows as a prefix → IncompleteInteractionError; an unknown path → SchemaViolationError.
- Leaves missing from the schema → UnknownOptionError; decode faults are re-raised
  with the path attached.
- Required options absent from the payload are not reported here; the handler
  observes them through ArgumentMatch.required().

Quick example
    >>> path, match = walk(root, schema)
    >>> str(path)
    'event create'
    >>> match.required("title", str)
    'Launch'
"""
import copy
import difflib
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import NamedTuple

from .faults import *
from .nodes import OptionNode
from .utils import Unset
from .values import OptionKind, Snowflake

logger = logging.getLogger(__name__)

# Platform nesting cap: command → group → subcommand.
MAX_DEPTH = 3


class CommandPath(tuple):
    """
    Ordered command names, from the top-level command down to the selected node.

    Invariants
    - 1 to 3 names, each a non-empty string without whitespace.
    - Comparison, hashing and lookups are those of a plain tuple, so
      CommandPath(("event", "create")) == ("event", "create").
    """

    def __new__(cls, names=(), /):
        if isinstance(names, str):
            raise TypeError("command-path names must be an iterable of strings; use CommandPath.parse() for text")
        names = tuple(names)
        if not 1 <= len(names) <= MAX_DEPTH:
            raise ValueError(f"command-path must hold 1 to {MAX_DEPTH} names, got {len(names)}")
        for name in names:
            if not isinstance(name, str):
                raise TypeError("command-path names must be strings")
            if not name or name.split() != [name]:
                raise ValueError(f"command-path name {name!r} must be non-empty and contain no whitespace")
        return super().__new__(cls, names)

    @classmethod
    def parse(cls, text, /):
        """
        Build a path from its space-separated form ("event create").
        """
        if not isinstance(text, str):
            raise TypeError("CommandPath.parse() argument must be a string")
        return cls(text.split())

    @classmethod
    def coerce(cls, object, /):
        """
        Accept a CommandPath, a space-separated string, or an iterable of names.
        """
        if isinstance(object, cls):
            return object
        if isinstance(object, str):
            return cls.parse(object)
        return cls(object)

    @property
    def command(self):
        return self[0]

    @property
    def parent(self):
        """The enclosing path, or None for a top-level command."""
        return CommandPath(self[:-1]) if len(self) > 1 else None

    def startswith(self, other, /):
        other = tuple(other)
        return self[:len(other)] == other

    def __str__(self):
        return " ".join(self)

    def __repr__(self):
        return f"command-path({str(self)!r})"


class Entity(NamedTuple):
    """
    Resolved object behind a snowflake option.

    - kind: the concrete referent kind (a mentionable resolves to USER or ROLE).
    - id: the Snowflake as decoded from the option.
    - data: the resolved object from the interaction (read-only), or None.
    - member: guild member data for users when present, else None.
    """
    kind: OptionKind
    id: Snowflake
    data: Mapping | None
    member: Mapping | None


_RESOLVED = {
    OptionKind.USER: "users",
    OptionKind.ROLE: "roles",
    OptionKind.CHANNEL: "channels",
    OptionKind.ATTACHMENT: "attachments",
}


def _variant_label(expected):
    if isinstance(expected, OptionKind):
        return expected.label
    return {str: "string", int: "integer", float: "number", bool: "boolean", Snowflake: "snowflake"}.get(
        expected, getattr(expected, "__name__", str(expected))
    )


def _value_label(value):
    if isinstance(value, Snowflake):
        return value.kind.label
    return _variant_label(type(value))


class ArgumentMatch(Mapping):
    """
    Immutable map of option name → decoded value for one interaction.

    Accessors
    - required(name, expected): value, or MissingArgumentError / WrongTypeError.
    - optional(name, expected, default=None): value, default when absent, or WrongTypeError.
    - has(name) / `name in match`: presence check.
    - entity(name): resolved Entity for a snowflake option.

    Variant checks are strict: `expected` is one of str, int, float, bool, Snowflake,
    or an OptionKind (which, for referent kinds, also checks the snowflake's tag).
    A bool never satisfies int, an int never satisfies float.

    Iteration yields names in insertion order (the payload order).
    """

    def __init__(self, values=(), /, path=Unset, resolved=Unset):
        self._values = MappingProxyType(dict(values))
        self._path = Unset if path is Unset or path is None else CommandPath.coerce(path)
        self._resolved = MappingProxyType(dict(resolved or {}))

    @property
    def path(self):
        """The CommandPath these arguments were matched at (None when built by hand)."""
        return self._path or None

    def __getitem__(self, name, /):
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return "argument-match(%s)" % ", ".join("%s=%r" % pair for pair in self._values.items())

    def __rich_repr__(self):
        yield from self._values.items()

    def has(self, name, /):
        return name in self._values

    def _check(self, name, value, expected):
        if isinstance(expected, OptionKind):
            if expected.grouping:
                raise TypeError(f"cannot extract a {expected.label} as an argument value")
            if expected.referent:
                matched = isinstance(value, Snowflake) and value.kind is expected
            else:
                matched = type(value) is expected.variant
        elif expected in (str, int, float, bool, Snowflake):
            matched = type(value) is expected
        else:
            raise TypeError("expected variant must be one of str, int, float, bool, Snowflake or an OptionKind")

        if not matched:
            raise WrongTypeError(
                "option %r was decoded as %s, not %s" % (name, _value_label(value), _variant_label(expected)),
                hint="read it as %s or fix the command schema" % _value_label(value),
                name=name,
                path=self._path or None,
                expected=expected,
                found=type(value),
                value=value,
                docs=getdoc(FaultCode.WRONG_TYPE),
            )
        return value

    def required(self, name, expected, /):
        """
        Return the value for `name`, checked against `expected`.

        Raises
        - MissingArgumentError when the option is absent.
        - WrongTypeError when it is present with another variant.
        """
        try:
            value = self._values[name]
        except KeyError:
            raise MissingArgumentError(
                "missing value for option %r" % name,
                hint="the option is declared but was not sent; make it required or read it with optional()",
                name=name,
                path=self._path or None,
                expected=expected,
                docs=getdoc(FaultCode.MISSING_ARGUMENT),
            ) from None
        return self._check(name, value, expected)

    def optional(self, name, expected, /, default=None):
        """
        Return the value for `name`, or `default` when absent.

        Raises
        - WrongTypeError when the option is present with another variant.
        """
        try:
            value = self._values[name]
        except KeyError:
            return default
        return self._check(name, value, expected)

    def entity(self, name, /):
        """
        Look up the resolved object behind a snowflake option.

        Raises
        - MissingArgumentError / WrongTypeError as required(name, Snowflake) does.
        """
        snowflake = self.required(name, Snowflake)
        key = str(snowflake)
        kind = snowflake.kind

        if kind is OptionKind.MENTIONABLE:
            if key in (self._resolved.get("users") or {}):
                kind = OptionKind.USER
            elif key in (self._resolved.get("roles") or {}):
                kind = OptionKind.ROLE
            else:
                return Entity(kind, snowflake, None, None)

        data = (self._resolved.get(_RESOLVED[kind]) or {}).get(key)
        member = (self._resolved.get("members") or {}).get(key) if kind is OptionKind.USER else None
        return Entity(
            kind,
            snowflake,
            MappingProxyType(data) if isinstance(data, Mapping) else None,
            MappingProxyType(member) if isinstance(member, Mapping) else None,
        )


def _descend(node, depth):
    """
    Pick the single grouping child of `node`, or None when its children are leaves.
    """
    groups = [child for child in node.children if child.grouping]
    leaves = [child for child in node.children if not child.grouping]

    if groups and leaves:
        raise SchemaViolationError(
            "%s %r mixes subcommands with options" % (node.kind.label, node.name),
            hint="a node either selects one subcommand or carries options, never both",
            name=node.name,
            docs=getdoc(FaultCode.SCHEMA_VIOLATION),
        )

    if not groups:
        if node.kind is OptionKind.SUBCOMMAND_GROUP:
            if leaves:
                raise SchemaViolationError(
                    "subcommand group %r carries options instead of a subcommand" % node.name,
                    hint="groups only contain subcommands",
                    name=node.name,
                    docs=getdoc(FaultCode.SCHEMA_VIOLATION),
                )
            raise IncompleteInteractionError(
                "subcommand group %r did not select a subcommand" % node.name,
                hint="pick one of the group's subcommands",
                name=node.name,
                docs=getdoc(FaultCode.INCOMPLETE_INTERACTION),
            )
        return None

    if len(groups) > 1:
        raise AmbiguousInteractionError(
            "%s %r selects %d subcommands at once (%s)" % (
                node.kind.label, node.name, len(groups), ", ".join(repr(child.name) for child in groups)
            ),
            hint="an interaction resolves to exactly one subcommand",
            name=node.name,
            docs=getdoc(FaultCode.AMBIGUOUS_INTERACTION),
        )

    child, = groups
    if depth >= MAX_DEPTH:
        raise SchemaViolationError(
            "%s %r nests deeper than %d levels" % (child.kind.label, child.name, MAX_DEPTH),
            hint="commands nest at most as command → group → subcommand",
            name=child.name,
            docs=getdoc(FaultCode.SCHEMA_VIOLATION),
        )

    allowed = {
        OptionKind.COMMAND: (OptionKind.SUBCOMMAND_GROUP, OptionKind.SUBCOMMAND),
        OptionKind.SUBCOMMAND_GROUP: (OptionKind.SUBCOMMAND,),
    }.get(node.kind, ())
    if child.kind not in allowed:
        raise SchemaViolationError(
            "%s %r cannot appear inside %s %r" % (child.kind.label, child.name, node.kind.label, node.name),
            hint="commands nest at most as command → group → subcommand",
            name=child.name,
            docs=getdoc(FaultCode.SCHEMA_VIOLATION),
        )
    return child


def walk(root, schema, /, resolved=None):
    """
    Walk an interaction option tree into (CommandPath, ArgumentMatch).

    Parameters
    - root: OptionNode
      The COMMAND node (typically OptionNode.from_payload(interaction["data"])).
    - schema: CommandSchema
      Declared options per terminal path.
    - resolved: Mapping | None
      The interaction's `resolved` object, used by ArgumentMatch.entity().

    Raises
    - MatchError subclasses (DecodeError included). See the module docstring.
    """
    if not isinstance(root, OptionNode):
        raise TypeError("walk() first argument must be an option-node")
    if root.kind is not OptionKind.COMMAND:
        raise SchemaViolationError(
            "interaction root %r is a %s, not a command" % (root.name, root.kind.label),
            hint="walk the interaction's data object, not one of its options",
            name=root.name,
            docs=getdoc(FaultCode.SCHEMA_VIOLATION),
        )

    names = [root.name]
    node = root
    try:
        while child := _descend(node, len(names)):
            names.append(child.name)
            node = child
    except MatchError as fault:
        raise copy.replace(fault, path=CommandPath(names)) from None

    path = CommandPath(names)

    try:
        options = schema.options(path)
    except KeyError:
        if schema.branches(path):
            raise IncompleteInteractionError(
                "command %r did not select a subcommand" % str(path),
                hint="pick one of: %s" % ", ".join(repr(str(branch)) for branch in schema.branches(path)),
                path=path,
                docs=getdoc(FaultCode.INCOMPLETE_INTERACTION),
            ) from None
        raise SchemaViolationError(
            "command %r is not declared in the schema" % str(path),
            hint="declare the command path before dispatching its interactions",
            path=path,
            docs=getdoc(FaultCode.SCHEMA_VIOLATION),
        ) from None

    values = {}
    for leaf in node.children:
        if leaf.name in values:
            raise SchemaViolationError(
                "option %r is sent more than once in %r" % (leaf.name, str(path)),
                hint="option names are unique among siblings",
                name=leaf.name,
                path=path,
                docs=getdoc(FaultCode.SCHEMA_VIOLATION),
            )

        try:
            option = options[leaf.name]
        except KeyError:
            suggestions = difflib.get_close_matches(leaf.name, options.keys(), 5)
            try:
                hint = "did you mean %r? the schema for %r may be out of date" % (suggestions[0], str(path))
            except IndexError:
                hint = "the schema for %r may be out of date" % str(path)
            raise UnknownOptionError(
                "unknown option %r in %r" % (leaf.name, str(path)),
                hint=hint,
                name=leaf.name,
                path=path,
                suggestions=suggestions,
                docs=getdoc(FaultCode.UNKNOWN_OPTION),
            ) from None

        try:
            values[leaf.name] = option.decode(leaf.value)
        except DecodeError as fault:
            raise copy.replace(fault, path=path) from None

    logger.debug("matched %r with %d option(s)", str(path), len(values))
    return path, ArgumentMatch(values, path, resolved)


__all__ = (
    "CommandPath",
    "ArgumentMatch",
    "Entity",
    "walk",
)
