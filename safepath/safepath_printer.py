"""
A printer that renders access steps and chains as path text.
"""
import json
import re

from safepath.safepath_datatypes import (
    AccessChain, Property, Index, Call, Missing, Empty
)

_IDENT_RE = re.compile(r"[A-Za-z_$][A-Za-z0-9_$]*")


class Printer:
    """Formats safepath objects into path text that compiles back to the same chain."""

    def __init__(self):
        self._handlers = self._create_handlers()

    def pformat(self, obj) -> str:
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        # Fast path for singletons
        if obj is Missing or obj is Empty:
            return repr
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, AccessChain):
            return self._pformat_chain
        return repr

    def _create_handlers(self):
        return {
            AccessChain: self._pformat_chain,
            Property: lambda o: self._pformat_step(o, guarded=False),
            Index: lambda o: self._pformat_step(o, guarded=False),
            Call: lambda o: self._pformat_step(o, guarded=False),
        }

    def _pformat_chain(self, chain: AccessChain) -> str:
        parts = []
        for pos, (step, guarded) in enumerate(chain.pairs()):
            text = self._pformat_step(step, guarded)
            # A leading unguarded property is written as a bare name.
            if pos == 0 and not guarded and text.startswith("."):
                text = text[1:]
            parts.append(text)
        return "".join(parts)

    def _pformat_step(self, step, guarded: bool) -> str:
        match step:
            case Property():
                if _IDENT_RE.fullmatch(step.name):
                    return ("?." if guarded else ".") + step.name
                body = f"[{json.dumps(step.name)}]"
            case Index():
                body = f"[{step.i}]"
            case Call():
                body = f"({self._pformat_args(step)})"
            case _:
                raise TypeError(f"Unsupported access step for printing: {type(step)}")
        return ("?." if guarded else "") + body

    def _pformat_args(self, step: Call) -> str:
        if step.make_args is not None:
            return "..."
        parts = [self._pformat_literal(a) for a in step.args]
        parts += [f"{k}={self._pformat_literal(v)}" for k, v in step.kwargs.items()]
        return ", ".join(parts)

    def _pformat_literal(self, value) -> str:
        try:
            return json.dumps(value)
        except (TypeError, ValueError):
            return repr(value)
