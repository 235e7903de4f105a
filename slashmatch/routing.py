"""
Slashmatch routing: the handler registry and the command path resolver.

- HandlerRegistry: explicit CommandPath → handler table. Registries are plain
  values passed to dispatch(), so several of them can coexist (one per bot, one
  per test case).
- resolve(path, registry): exact, case-sensitive lookup; never invokes the handler.

Registration happens before dispatching starts; the registry is then only read.

Example:
    >>> registry = HandlerRegistry()
    >>> @registry.command("event create")
    ... def create(match):
    ...     return "created %s" % match.required("title", str)
    >>> resolve(("event", "create"), registry) is create
    True
"""
import difflib
import logging
from collections.abc import Mapping
from types import MappingProxyType

from .faults import UnregisteredCommandError, FaultCode, getdoc
from .matching import CommandPath
from .utils import Unset

logger = logging.getLogger(__name__)


class HandlerRegistry(Mapping):
    """
    Mapping of CommandPath → handler callable.

    Rules
    - handlers must be callable; they receive the ArgumentMatch of the interaction.
    - a path is registered at most once (ValueError otherwise).
    - an optional fallback receives faults instead of trigger() (see dispatch()).
    """

    def __init__(self):
        self._handlers = {}
        self._fallback = Unset

    def __getitem__(self, path, /):
        return self._handlers[CommandPath.coerce(path)]

    def __iter__(self):
        return iter(self._handlers)

    def __len__(self):
        return len(self._handlers)

    def __contains__(self, path, /):
        try:
            return CommandPath.coerce(path) in self._handlers
        except (TypeError, ValueError):
            return False

    def __repr__(self):
        return "handler-registry(%s)" % ", ".join(repr(str(path)) for path in self._handlers)

    def __rich_repr__(self):
        for path, handler in self._handlers.items():
            yield str(path), getattr(handler, "__qualname__", handler)

    @property
    def handlers(self):
        return MappingProxyType(self._handlers)

    @property
    def fallback(self):
        return self._fallback or None

    def register(self, path, handler, /):
        """
        Bind `handler` to `path` (a CommandPath, names tuple, or "event create").

        Raises
        - TypeError: handler is not callable.
        - ValueError: the path already has a handler.
        """
        path = CommandPath.coerce(path)
        if not callable(handler):
            raise TypeError(f"handler-registry handler for {str(path)!r} must be callable")
        if self._handlers.setdefault(path, handler) is not handler:
            raise ValueError(f"handler-registry path {str(path)!r} is already in use")
        logger.debug("registered %r → %s", str(path), getattr(handler, "__qualname__", handler))
        return handler

    def command(self, path, /):
        """
        Decorator form of register():

            @registry.command("event create")
            def create(match): ...
        """
        path = CommandPath.coerce(path)

        def decorator(handler):
            return self.register(path, handler)
        return decorator

    def on_fault(self, fallback, /):
        """
        Register a one-time fallback for faults raised while dispatching.

        The fallback is called with the fault and its return value becomes the
        dispatch result (e.g. the reply text). Returns the callable, so it can be
        used as a decorator: @registry.on_fault
        """
        if not callable(fallback):
            raise TypeError("handler-registry fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError("handler-registry fallback cannot be overridden")
        self._fallback = fallback
        return fallback


def resolve(path, registry, /):
    """
    Return the handler registered for `path`.

    Path equality is exact: order- and case-sensitive, no prefix matching.

    Raises
    - UnregisteredCommandError when no handler is bound to the path.
    """
    path = CommandPath.coerce(path)
    try:
        return registry[path]
    except KeyError:
        pass

    known = [str(other) for other in registry]
    suggestions = difflib.get_close_matches(str(path), known, 5)
    try:
        hint = "did you mean %r? register a handler for %r" % (suggestions[0], str(path))
    except IndexError:
        hint = "register a handler for %r before dispatching" % str(path)
    raise UnregisteredCommandError(
        "no handler is registered for %r" % str(path),
        hint=hint,
        path=path,
        suggestions=suggestions,
        docs=getdoc(FaultCode.UNREGISTERED_COMMAND),
    )


__all__ = (
    "HandlerRegistry",
    "resolve",
)
