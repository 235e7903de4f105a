"""
Slashmatch dispatch loop: payload → walk → resolve → handler, faults → replies.

dispatch() is the single place where faults from every stage (decoding, matching,
argument extraction inside the handler, routing) are caught and surfaced. It is a
reference loop: hosts with their own transport can call walk()/resolve() directly
and reuse respond() for reply text.

Options
- shell: bool = False
  Render faults to stderr with rich and return the reply text instead of raising.
- fancy: bool = False
  Render faults inside a panel.
- colorful: bool = True
  Style rendered faults.
- prefix: str = "Error: "
  Prefix of the reply text built by respond().

When the registry has a fallback (HandlerRegistry.on_fault), the fault is passed
to it and its return value is the dispatch result; shell rendering is skipped.
"""
import logging

from .faults import CommandException, FaultCode, trigger
from .matching import walk
from .nodes import OptionNode
from .routing import resolve

logger = logging.getLogger(__name__)


def respond(fault, /, prefix="Error: "):
    """
    User-facing reply text for a fault: the prefix followed by its message.
    """
    if not isinstance(fault, CommandException):
        raise TypeError("respond() argument must be a command-exception")
    return f"{prefix}{fault}"


def dispatch(data, schema, registry, /, *, shell=False, fancy=False, colorful=True, prefix="Error: "):
    """
    Route one interaction `data` object to its handler.

    Parameters
    - data: Mapping
      The interaction's decoded `data` object (`name`, `options`, `resolved`).
    - schema: CommandSchema
    - registry: HandlerRegistry

    Returns
    - The handler's return value; on a fault, the fallback's return value or, in
      shell mode, respond(fault, prefix).

    Raises
    - CommandException subclasses in non-shell mode without a fallback.
    """
    try:
        root = OptionNode.from_payload(data)
        path, match = walk(root, schema, resolved=data.get("resolved"))
        handler = resolve(path, registry)
        logger.debug("dispatching %r to %s", str(path), getattr(handler, "__qualname__", handler))
        return handler(match)
    except CommandException as fault:
        logger.info("interaction fault %s: %s", fault.code.normalize() if isinstance(fault.code, FaultCode) else "?", fault)
        if registry.fallback is not None:
            return registry.fallback(fault)
        trigger(fault, shell=shell, fancy=fancy, colorful=colorful)
        return respond(fault, prefix)


__all__ = (
    "dispatch",
    "respond",
)
