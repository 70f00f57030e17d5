"""
The safe path accessor: walks an access chain left to right with
optional-chaining short-circuit semantics.
"""
import collections.abc
import logging
from typing import Any, Optional, Sequence, Union

from safepath.safepath_datatypes import (
    AccessChain, AccessStep, Property, Index, Call, Missing,
    InvalidAccessError, TypeMismatchError, is_absent
)

logger = logging.getLogger(__name__)


class SafePathAccessor:
    """Handles chain traversal and the guarded/unguarded fault policy."""

    def evaluate(self, root: Any, chain: Sequence[AccessStep], safe_flags: Optional[Sequence[bool]] = None) -> Any:
        """Evaluates `chain` against `root`.

        Returns the last step's value, or Missing when a guarded step met an
        absent value. Raises InvalidAccessError when an unguarded step meets an
        absent value and TypeMismatchError when an unguarded step meets a value
        without the needed capability.
        """
        flags = self._flags_for(chain, safe_flags)
        current = root
        for pos, step in enumerate(chain):
            guarded = flags[pos]
            if is_absent(current):
                if guarded:
                    logger.debug("short-circuit at step %d (%s)", pos, step.kind)
                    return Missing
                raise InvalidAccessError(pos, step.kind, step)
            current = self._apply_step(current, step, pos, guarded)
        return current

    def _flags_for(self, chain, safe_flags):
        if safe_flags is None:
            if isinstance(chain, AccessChain):
                return chain.safe_flags
            return (False,) * len(chain)
        flags = tuple(bool(f) for f in safe_flags)
        if len(flags) != len(chain):
            raise ValueError(f"chain has {len(chain)} steps but {len(flags)} safe flags")
        return flags

    def _apply_step(self, value: Any, step: AccessStep, pos: int, guarded: bool) -> Any:
        """Applies one step to a present value."""
        match step:
            case Property():
                if not isinstance(value, collections.abc.Mapping):
                    if guarded:
                        return Missing
                    raise TypeMismatchError(pos, step.kind, value, step)
                return self._read_key(value, step.name)
            case Index():
                # Out of range is absence, not a type error, guarded or not.
                if not _is_sequence(value):
                    return Missing
                if step.i < 0 or step.i >= len(value):
                    return Missing
                return value[step.i]
            case Call():
                if not callable(value):
                    if guarded:
                        return Missing
                    raise TypeMismatchError(pos, step.kind, value, step)
                return value(*step.resolve_args(), **step.kwargs)
            case _:
                raise TypeError(f"Unsupported access step at position {pos}: {step!r}")

    def _read_key(self, record: collections.abc.Mapping, name: str) -> Any:
        # Membership first so mappings with __missing__ are never written to.
        if name not in record:
            return Missing
        return record[name]

    def get_path(self, root: Any, path: Union[str, AccessChain]) -> Any:
        """Evaluates a compiled chain or path text against `root`."""
        if isinstance(path, str):
            from safepath.safepath_parser import compile_path
            path = compile_path(path)
        return self.evaluate(root, path)


def _is_sequence(value) -> bool:
    return isinstance(value, collections.abc.Sequence)


_accessor = SafePathAccessor()


def evaluate(root: Any, chain: Sequence[AccessStep], safe_flags: Optional[Sequence[bool]] = None) -> Any:
    """Module-level shortcut for SafePathAccessor().evaluate."""
    return _accessor.evaluate(root, chain, safe_flags)


def get_path(root: Any, path: Union[str, AccessChain]) -> Any:
    """Module-level shortcut for SafePathAccessor().get_path."""
    return _accessor.get_path(root, path)
