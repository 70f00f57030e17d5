"""
Compiles path text such as `user?.address.lines[0]` into an AccessChain.
"""
import logging
from pathlib import Path
from typing import Dict

import yaml
from koine import Parser

from safepath.safepath_datatypes import AccessChain, PathSyntaxError
from safepath.safepath_transformer import PathTransformer

logger = logging.getLogger(__name__)


class PathCompiler:
    """Parses path text with the koine grammar and transforms the AST into a chain."""

    grammar_path: Path = Path(__file__).parent / "safepath_grammar.yaml"

    # Compiled grammars are read-only, so one per grammar file is shared.
    _parsers: Dict[str, Parser] = {}

    def __init__(self):
        key = str(self.grammar_path)
        if key not in PathCompiler._parsers:
            PathCompiler._parsers[key] = self._load_parser(self.grammar_path)
        self.parser = PathCompiler._parsers[key]
        self.transformer = PathTransformer()

    def _load_parser(self, grammar_path: Path) -> Parser:
        with grammar_path.open(encoding="utf-8") as f:
            grammar_def = yaml.safe_load(f)
        logger.debug("compiled path grammar from %s", grammar_path)
        return Parser(grammar_def, base_path=grammar_path.parent)

    def compile(self, text: str) -> AccessChain:
        if not isinstance(text, str):
            raise TypeError(f"path text must be a str, not {type(text).__name__}")
        parse_out = self.parser.parse(text)
        if parse_out.get('status') != 'success':
            raise PathSyntaxError(text, parse_out.get('message') or str(parse_out))
        return self.transformer.transform(parse_out['ast'], text)


def compile_path(text: str) -> AccessChain:
    """Compiles path text into an AccessChain carrying its guard flags."""
    return PathCompiler().compile(text)
