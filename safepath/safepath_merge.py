"""
Shallow merge with last-writer-wins precedence, the `{...a, ...b}` spread.
"""
import collections.abc
from typing import Any, Dict, Iterable

from safepath.safepath_datatypes import is_absent


class ShallowMerger:
    """Combines records one key level deep; the right-most source wins."""

    def merge(self, sources: Iterable[Any]) -> Dict[Any, Any]:
        out: Dict[Any, Any] = {}
        for pos, source in enumerate(sources):
            # Spreading a null-like source contributes nothing.
            if is_absent(source):
                continue
            if not isinstance(source, collections.abc.Mapping):
                raise TypeError(
                    f"merge source {pos} must be a mapping, not {type(source).__name__}"
                )
            for key in source.keys():
                out[key] = source[key]
        return out


_merger = ShallowMerger()


def merge(sources: Iterable[Any]) -> Dict[Any, Any]:
    """Returns a new dict holding the union of `sources`, later sources overriding earlier ones."""
    return _merger.merge(sources)
