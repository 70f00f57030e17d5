
"""
Defines the core data types for safepath.

This module provides the absent markers, the access step types that make up
an access chain, and the exceptions raised while walking one.
"""

from abc import ABC
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence
import collections.abc


# =================================================================
# Errors
# =================================================================

class SafePathError(Exception):
    """Base class for every error raised by safepath."""
    pass


class InvalidAccessError(SafePathError):
    """An unguarded step was applied to an absent value."""
    def __init__(self, step_index: int, kind: str, step: Optional['AccessStep'] = None):
        self.step_index = step_index
        self.kind = kind
        self.step = step
        super().__init__(_describe_failure(step_index, kind, step, "value is absent"))


class TypeMismatchError(SafePathError, TypeError):
    """An unguarded step was applied to a value lacking the required capability."""
    def __init__(self, step_index: int, kind: str, value: Any, step: Optional['AccessStep'] = None):
        self.step_index = step_index
        self.kind = kind
        self.value = value
        self.step = step
        need = _CAPABILITY.get(kind, kind)
        super().__init__(_describe_failure(step_index, kind, step, f"{type(value).__name__} is not {need}"))


class PathSyntaxError(SafePathError, ValueError):
    """Path text was rejected by the path grammar."""
    def __init__(self, text: str, message: str):
        self.text = text
        self.message = message
        super().__init__(f"invalid path {text!r}: {message}")


_CAPABILITY = {
    "property": "a record",
    "index": "a sequence",
    "call": "callable",
}


def _describe_failure(step_index, kind, step, reason):
    where = f"step {step_index} ({kind}"
    if step is not None:
        from safepath.safepath_printer import Printer
        where += f" {Printer().pformat(step)}"
    return f"{where}): {reason}"


# =================================================================
# Absent markers
# =================================================================

class _Absent:
    """Internal helper class for the two absent singletons."""
    __slots__ = ("tag",)

    def __init__(self, tag: str):
        self.tag = tag

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return self.tag.capitalize()

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return self.tag.capitalize()


# Key/index not present, and the result of every short-circuit.
Missing = _Absent("missing")
# Explicit null-equivalent.
Empty = _Absent("empty")


def is_absent(value: Any) -> bool:
    """True for Missing, Empty and None (which counts as Empty)."""
    return value is None or isinstance(value, _Absent)


def absent_tag(value: Any) -> Optional[str]:
    """Returns 'missing' or 'empty' for absent values, otherwise None."""
    if value is None:
        return Empty.tag
    if isinstance(value, _Absent):
        return value.tag
    return None


# =================================================================
# Access steps
# =================================================================

class AccessStep(ABC):
    """Abstract base class for all components of an AccessChain."""
    kind: str = ""


class Property(AccessStep):
    """A property lookup in a record, e.g. `name` in `user.name`."""
    kind = "property"

    def __init__(self, name: str):
        if not isinstance(name, str):
            raise TypeError(f"Property name must be a str, not {type(name).__name__}")
        self.name = name

    def __repr__(self) -> str:
        return f"Property<{self.name!r}>"

    def __eq__(self, other):
        return isinstance(other, Property) and self.name == other.name

    def __hash__(self):
        return hash(("property", self.name))


class Index(AccessStep):
    """A position lookup in an ordered sequence, e.g. `[0]`."""
    kind = "index"

    def __init__(self, i: int):
        # bool is an int subclass but never a meaningful position
        if isinstance(i, bool) or not isinstance(i, int):
            raise TypeError(f"Index position must be an int, not {type(i).__name__}")
        self.i = i

    def __repr__(self) -> str:
        return f"Index({self.i})"

    def __eq__(self, other):
        return isinstance(other, Index) and self.i == other.i

    def __hash__(self):
        return hash(("index", self.i))


class Call(AccessStep):
    """Invokes the current value, e.g. `(1, 2)` in `fn(1, 2)`.

    Arguments given to the constructor are fixed up front. Use
    `Call.deferred(fn)` when producing the arguments has side effects that a
    short-circuit must skip: `fn()` only runs when the step executes.
    """
    kind = "call"

    def __init__(self, *args: Any, **kwargs: Any):
        self.args = tuple(args)
        self.kwargs: Dict[str, Any] = dict(kwargs)
        self.make_args: Optional[Callable[[], Iterable[Any]]] = None

    @classmethod
    def deferred(cls, make_args: Callable[[], Iterable[Any]], **kwargs: Any) -> 'Call':
        step = cls(**kwargs)
        step.make_args = make_args
        return step

    def resolve_args(self) -> tuple:
        if self.make_args is not None:
            return tuple(self.make_args())
        return self.args

    def __repr__(self) -> str:
        if self.make_args is not None:
            return f"Call(deferred={self.make_args!r})"
        parts = [repr(a) for a in self.args] + [f"{k}={v!r}" for k, v in self.kwargs.items()]
        return f"Call({', '.join(parts)})"

    def __eq__(self, other):
        if not isinstance(other, Call):
            return False
        return (
            self.args == other.args and
            self.kwargs == other.kwargs and
            self.make_args is other.make_args
        )

    def __hash__(self):
        try:
            return hash(("call", self.args, tuple(sorted(self.kwargs.items())), id(self.make_args)))
        except TypeError:
            # unhashable arguments
            return hash(("call", len(self.args), id(self.make_args)))


# =================================================================
# Chains
# =================================================================

class AccessChain(collections.abc.Sequence):
    """An ordered, immutable sequence of access steps with one guard flag per step.

    A guarded step (`?.`) short-circuits to Missing when the value entering it
    is absent; an unguarded step (`.`) raises InvalidAccessError instead.
    """
    def __init__(self, steps: Iterable[AccessStep] = (), safe_flags: Optional[Iterable[bool]] = None):
        self.steps = tuple(steps)
        for pos, step in enumerate(self.steps):
            if not isinstance(step, AccessStep):
                raise TypeError(f"AccessChain item {pos} is not an AccessStep: {step!r}")
        if safe_flags is None:
            self.safe_flags = (False,) * len(self.steps)
        else:
            self.safe_flags = tuple(bool(f) for f in safe_flags)
        if len(self.safe_flags) != len(self.steps):
            raise ValueError(
                f"AccessChain has {len(self.steps)} steps but {len(self.safe_flags)} safe flags"
            )
        self._str_repr: Optional[str] = None

    @classmethod
    def guarded(cls, steps: Sequence[AccessStep]) -> 'AccessChain':
        """Builds a chain where every step is guarded."""
        return cls(steps, [True] * len(steps))

    def __getitem__(self, key):
        if isinstance(key, slice):
            return AccessChain(self.steps[key], self.safe_flags[key])
        return self.steps[key]

    def __len__(self) -> int:
        return len(self.steps)

    def pairs(self) -> List[tuple]:
        """Returns (step, guarded) pairs in evaluation order."""
        return list(zip(self.steps, self.safe_flags))

    def to_str_repr(self) -> str:
        from safepath.safepath_printer import Printer
        if self._str_repr is None:
            self._str_repr = Printer().pformat(self)
        return self._str_repr

    def __repr__(self) -> str:
        return f"<AccessChain {self.to_str_repr()!r}>"

    def __eq__(self, other):
        if not isinstance(other, AccessChain):
            return NotImplemented
        return self.steps == other.steps and self.safe_flags == other.safe_flags

    def __hash__(self):
        return hash((self.steps, self.safe_flags))
