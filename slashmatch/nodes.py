"""
Interaction option nodes (read-only view of the decoded payload).

An OptionNode is one entry of the option tree an interaction carries:
- grouping nodes (COMMAND, SUBCOMMAND_GROUP, SUBCOMMAND) have children and no value;
- leaf nodes (STRING, INTEGER, ..., ATTACHMENT) have a value and no children.

Nodes never hold both; the constructor rejects such shapes. A grouping node may
hold no children at all: whether that is acceptable is decided by the walker,
which reports it as an incomplete interaction where a subcommand was due.

OptionNode.from_payload() adapts already-deserialized JSON (plain dicts/lists) into
nodes. The root of an interaction's `data` object becomes a COMMAND node; every
malformed entry is reported as a SchemaViolationError. Names are taken as sent:
empty names and names containing whitespace are rejected, never trimmed.

Example:
    >>> root = OptionNode.from_payload({
    ...     "name": "event",
    ...     "options": [{"name": "create", "type": 1, "options": [
    ...         {"name": "title", "type": 3, "value": "Launch"},
    ...     ]}],
    ... })
    >>> root.children[0].children[0].value
    'Launch'
"""
from collections.abc import Iterable, Mapping

from .faults import SchemaViolationError, FaultCode, getdoc
from .utils import Unset, mirror
from .values import OptionKind


class OptionNode:
    """
    Immutable option-tree node.

    Properties
    - name: str, non-empty.
    - kind: OptionKind.
    - value: the raw wire scalar for leaves; Unset for grouping nodes.
    - children: tuple[OptionNode, ...], empty for leaves.
    """
    name = mirror("name")
    kind = mirror("kind")
    value = mirror("value")

    def __init__(self, name, kind, /, value=Unset, children=()):
        if not isinstance(name, str):
            raise TypeError("option-node 'name' must be a string")
        elif not name or name.split() != [name]:
            raise ValueError(f"option-node 'name' {name!r} must be non-empty and contain no whitespace")

        kind = OptionKind(kind)

        if not isinstance(children, Iterable) or isinstance(children, str | Mapping):
            raise TypeError("option-node 'children' must be an iterable of nodes")
        children = tuple(children)
        if not all(isinstance(child, OptionNode) for child in children):
            raise TypeError("option-node 'children' must be an iterable of nodes")

        if kind.grouping and value is not Unset:
            raise ValueError(f"{kind.label} node {name!r} cannot carry a value")
        if not kind.grouping and value is Unset:
            raise ValueError(f"{kind.label} node {name!r} must carry a value")
        if not kind.grouping and children:
            raise ValueError(f"{kind.label} node {name!r} cannot have children")

        self._name = name
        self._kind = kind
        self._value = value
        self._children = children

    @property
    def children(self):
        # Tuples of immutable nodes need no defensive copy.
        return self._children

    @property
    def grouping(self):
        return self._kind.grouping

    def __setattr__(self, name, value, /):
        if hasattr(self, "_children"):
            raise AttributeError("option-node objects are immutable")
        super().__setattr__(name, value)

    def __eq__(self, other, /):
        if not isinstance(other, OptionNode):
            return NotImplemented
        return (self._name, self._kind, self._value, self._children) == (
            other._name, other._kind, other._value, other._children
        )

    def __hash__(self):
        return hash((self._name, self._kind, self._children))

    def __repr__(self):
        return "option-node(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self._name
        yield "kind", self._kind.label
        if self._value is not Unset:
            yield "value", self._value
        if self._children:
            yield "children", self._children

    @classmethod
    def from_payload(cls, data, /, kind=OptionKind.COMMAND):
        """
        Build a node tree from decoded JSON.

        Parameters
        - data: Mapping
          An interaction `data` object (root) or one entry of an `options` list,
          with keys `name`, `type` (entries only), `value` (leaves) and `options`
          (grouping nodes).
        - kind: OptionKind
          Kind of the root node; entries below it always read their own `type`.

        Raises
        - SchemaViolationError when an entry is not a mapping, has no usable
          name/type, or mixes `value` with `options`.
        """
        def violation(message, hint):
            return SchemaViolationError(
                message,
                hint=hint,
                docs=getdoc(FaultCode.SCHEMA_VIOLATION),
            )

        if not isinstance(data, Mapping):
            raise violation(
                "option entry must be an object, got %s" % type(data).__name__,
                "pass the decoded json object, not its text or a list",
            )

        name = data.get("name")
        if not isinstance(name, str) or not name.strip():
            raise violation("option entry has no name", "every option entry needs a non-empty 'name'")
        if name.split() != [name]:
            raise violation(
                "option name %r contains whitespace" % name,
                "command, subcommand and option names are single words",
            )

        try:
            kind = OptionKind(kind)
        except ValueError:
            raise violation(
                "option %r has unknown type %r" % (name, kind),
                "option types go from 1 (subcommand) to 11 (attachment)",
            ) from None

        options = data.get("options", ())
        if options is None:
            options = ()
        if not isinstance(options, list | tuple):
            raise violation("option %r has a non-list 'options' field" % name, "'options' must be a list of entries")

        children = []
        for entry in options:
            if not isinstance(entry, Mapping):
                raise violation(
                    "option %r has a non-object child entry" % name,
                    "every entry of 'options' must be an object",
                )
            if isinstance(entry.get("type"), bool) or not isinstance(entry.get("type"), int):
                raise violation(
                    "option %r has no integer type" % entry.get("name"),
                    "every option entry needs an integer 'type'",
                )
            children.append(cls.from_payload(entry, entry["type"]))

        try:
            return cls(name, kind, data.get("value", Unset), children)
        except (TypeError, ValueError) as error:
            raise violation(str(error), "leaves carry a 'value', subcommands and groups carry 'options'") from error


__all__ = (
    "OptionNode",
)
