"""
Slashmatch command schema: the declared options of every command path.

A CommandSchema maps each terminal CommandPath (a command without subcommands,
or a subcommand) to its leaf Option specs. Paths that only lead to subcommands
are not terminal; the schema knows them as branches so the walker can tell an
incomplete interaction from an unknown command.

Construction
- CommandSchema({path: options, ...}) where path is a CommandPath, a tuple of
  names or a space-separated string, and options is an iterable of Option.
- CommandSchema.from_payload(definition): read one application-command
  registration payload (the JSON used to register the command with the platform).
- CommandSchema.merge(*schemas) / schema | other: combine schemas; the same path
  may not be declared twice.

Validation (raised at construction as TypeError/ValueError)
- Option names are unique per path.
- A path cannot be both terminal and a prefix of another declared path (a command
  either carries options or selects a subcommand).

Example:
    >>> schema = CommandSchema({
    ...     "event create": [Option("title", OptionKind.STRING, required=True)],
    ...     "event delete": [Option("id", OptionKind.INTEGER, required=True)],
    ... })
    >>> schema.branches("event")
    (command-path('event create'), command-path('event delete'))
"""
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .arguments import Option
from .matching import CommandPath
from .values import OptionKind


class CommandSchema(Mapping):
    """
    Immutable mapping of terminal CommandPath → read-only {name: Option}.
    """

    def __init__(self, declarations=(), /):
        if isinstance(declarations, Mapping):
            declarations = declarations.items()

        paths = {}
        for path, options in declarations:
            path = CommandPath.coerce(path)
            if path in paths:
                raise ValueError(f"command-schema path {str(path)!r} is declared twice")
            if isinstance(options, Option) or not isinstance(options, Iterable):
                raise TypeError(f"command-schema options for {str(path)!r} must be an iterable of options")

            named = {}
            for option in options:
                if not isinstance(option, Option):
                    raise TypeError(f"command-schema options for {str(path)!r} must be an iterable of options")
                if option.name in named:
                    raise ValueError(f"command-schema option {option.name!r} is declared twice in {str(path)!r}")
                named[option.name] = option
            paths[path] = MappingProxyType(named)

        for path in paths:
            for other in paths:
                if other != path and other.startswith(path):
                    raise ValueError(
                        f"command-schema path {str(path)!r} cannot carry options and subcommand {str(other)!r}"
                    )

        self._paths = MappingProxyType(paths)

    def __getitem__(self, path, /):
        return self._paths[CommandPath.coerce(path)]

    def __iter__(self):
        return iter(self._paths)

    def __len__(self):
        return len(self._paths)

    def __contains__(self, path, /):
        try:
            return CommandPath.coerce(path) in self._paths
        except (TypeError, ValueError):
            return False

    def __repr__(self):
        return "command-schema(%s)" % ", ".join(repr(str(path)) for path in self._paths)

    def __rich_repr__(self):
        for path, options in self._paths.items():
            yield str(path), tuple(options.values())

    def __or__(self, other, /):
        if not isinstance(other, CommandSchema):
            return NotImplemented
        return CommandSchema.merge(self, other)

    def options(self, path, /):
        """
        Declared options of a terminal path.

        Raises
        - KeyError when the path is not terminal in this schema.
        """
        return self._paths[CommandPath.coerce(path)]

    def branches(self, path, /):
        """
        Declared terminal paths strictly below `path`, in declaration order.
        """
        path = CommandPath.coerce(path)
        return tuple(other for other in self._paths if len(other) > len(path) and other.startswith(path))

    @classmethod
    def merge(cls, *schemas):
        declarations = []
        for schema in schemas:
            if not isinstance(schema, CommandSchema):
                raise TypeError("CommandSchema.merge() arguments must be command-schemas")
            declarations.extend((path, options.values()) for path, options in schema.items())
        return cls(declarations)

    @classmethod
    def from_payload(cls, definition, /):
        """
        Build a schema from an application-command registration payload.

        The payload is the decoded JSON object of one chat-input command:
        `name` plus `options`, where entries of type 2 (subcommand group) and
        1 (subcommand) nest further `options`, and any other entry is a leaf
        option read by Option.from_payload().

        Raises
        - TypeError / ValueError on malformed definitions.
        """
        if not isinstance(definition, Mapping):
            raise TypeError("CommandSchema.from_payload() argument must be a mapping")

        declarations = []

        def visit(names, entries):
            leaves = []
            for entry in entries or ():
                if not isinstance(entry, Mapping):
                    raise TypeError("command-schema payload entries must be mappings")
                if entry.get("type") in (OptionKind.SUBCOMMAND, OptionKind.SUBCOMMAND_GROUP):
                    visit(names + [entry.get("name")], entry.get("options"))
                else:
                    leaves.append(Option.from_payload(entry))

            nested = any(
                isinstance(entry, Mapping) and entry.get("type") in (OptionKind.SUBCOMMAND, OptionKind.SUBCOMMAND_GROUP)
                for entry in entries or ()
            )
            if nested and leaves:
                raise ValueError(f"command-schema payload {' '.join(names)!r} mixes subcommands with options")
            if not nested:
                declarations.append((CommandPath(names), leaves))

        visit([definition.get("name")], definition.get("options"))
        return cls(declarations)


__all__ = (
    "CommandSchema",
)
