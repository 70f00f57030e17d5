"""
Transforms the raw koine path AST into an AccessChain.
"""
import json

from safepath.safepath_datatypes import (
    AccessChain, Property, Index, Call, PathSyntaxError
)

_GUARD = "?."


class PathTransformer:
    def transform(self, node: dict, text: str = "") -> AccessChain:
        if not isinstance(node, dict) or node.get('tag') != 'path':
            raise PathSyntaxError(text, f"expected a path node, got {node!r}")
        steps = []
        flags = []
        for child in node.get('children', []):
            step, guarded = self._transform_step(child, text)
            steps.append(step)
            flags.append(guarded)
        return AccessChain(steps, flags)

    def _transform_step(self, node: dict, text: str):
        tag = node.get('tag', '')
        raw = node.get('text', '')
        guarded = tag.startswith('guarded-')
        if guarded:
            tag = tag[len('guarded-'):]
            raw = raw[len(_GUARD):]

        match tag:
            case 'name':
                return Property(raw), False
            case 'property':
                # '?.' was already stripped; unguarded still has its '.'
                return Property(raw if guarded else raw[1:]), guarded
            case 'index':
                return Index(int(raw[1:-1])), guarded
            case 'key':
                return Property(self._load_json(raw[1:-1], node, text)), guarded
            case 'call':
                args = self._load_json(f"[{raw[1:-1]}]", node, text)
                return Call(*args), guarded
            case _:
                raise PathSyntaxError(text, f"unsupported path step {node.get('tag')!r}")

    def _load_json(self, payload: str, node: dict, text: str):
        try:
            return json.loads(payload)
        except json.JSONDecodeError as e:
            col = node.get('col')
            raise PathSyntaxError(text, f"bad literal at col {col}: {e.msg}") from e
