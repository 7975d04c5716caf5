"""Format-string parser.

Grammar::

    template  := item*
    item      := literal | escape | variable | group | paren
    variable  := "$" IDENT | "${" IDENT "}"
    group     := "[" template "]" [ "(" style-words ")" ]
    paren     := "(" template ")"          # spliced into the parent sequence
    escape    := "\\" one of  $ [ ] ( ) \\

``IDENT`` is ``[A-Za-z0-9_]+``. A parenthesised run that does not directly
follow ``]`` is a plain grouping: it emits no characters of its own and does
not scope variable absence, so ``[$symbol($version )]`` vanishes as a whole
when ``version`` is absent.
Groups and parentheses nest at most ``MAX_NESTING`` levels deep.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..errors import TemplateSyntaxError
from .nodes import Group, Literal, Meta, StyleRef, Template, TemplateNode, Variable

ESCAPABLE = frozenset("$[]()\\")
MAX_NESTING = 64


def _is_ident_char(ch: str) -> bool:
    return ch == "_" or ch.isascii() and ch.isalnum()


def _append(nodes: list[TemplateNode], node: TemplateNode) -> None:
    """Append ``node``, merging adjacent literal runs."""
    if isinstance(node, Literal):
        if not node.text:
            return
        if nodes and isinstance(nodes[-1], Literal):
            nodes[-1] = Literal(nodes[-1].text + node.text)
            return
    nodes.append(node)


class _Parser:
    def __init__(self, source: str, meta_variables: frozenset[str]) -> None:
        self.source = source
        self.meta_variables = meta_variables
        self.pos = 0
        self.depth = 0

    def error(self, message: str, position: int) -> TemplateSyntaxError:
        return TemplateSyntaxError(message, position, self.source)

    def peek(self) -> str:
        return self.source[self.pos] if self.pos < len(self.source) else ""

    def parse(self) -> Template:
        nodes = self.sequence(closer="")
        return Template(source=self.source, nodes=tuple(nodes))

    def sequence(self, closer: str) -> list[TemplateNode]:
        """Parse items until ``closer`` (not consumed) or end of input."""
        nodes: list[TemplateNode] = []
        text: list[str] = []

        def flush() -> None:
            if text:
                _append(nodes, Literal("".join(text)))
                text.clear()

        while self.pos < len(self.source):
            ch = self.source[self.pos]
            if ch == closer:
                break
            if ch == "\\":
                text.append(self.escape())
            elif ch == "$":
                flush()
                _append(nodes, self.variable())
            elif ch == "[":
                flush()
                _append(nodes, self.group())
            elif ch == "(":
                flush()
                for node in self.paren():
                    _append(nodes, node)
            elif ch in "])":
                raise self.error(f"unbalanced '{ch}'", self.pos)
            else:
                text.append(ch)
                self.pos += 1
        flush()
        return nodes

    def nested(self, closer: str, start: int) -> list[TemplateNode]:
        if self.depth >= MAX_NESTING:
            raise self.error("groups nested too deeply", start)
        self.depth += 1
        try:
            return self.sequence(closer)
        finally:
            self.depth -= 1

    def escape(self) -> str:
        start = self.pos
        self.pos += 1
        ch = self.peek()
        if not ch:
            raise self.error("dangling escape", start)
        if ch not in ESCAPABLE:
            raise self.error(f"unknown escape '\\{ch}'", start)
        self.pos += 1
        return ch

    def identifier(self, start: int) -> str:
        begin = self.pos
        while self.pos < len(self.source) and _is_ident_char(self.source[self.pos]):
            self.pos += 1
        name = self.source[begin:self.pos]
        if not name:
            raise self.error("empty variable name", start)
        return name

    def variable_name(self) -> str:
        start = self.pos
        self.pos += 1  # "$"
        if self.peek() == "{":
            self.pos += 1
            name = self.identifier(start)
            if self.peek() != "}":
                raise self.error("expected '}' after variable name", self.pos)
            self.pos += 1
            return name
        return self.identifier(start)

    def variable(self) -> TemplateNode:
        name = self.variable_name()
        if name in self.meta_variables:
            return Meta(name)
        return Variable(name)

    def group(self) -> Group:
        start = self.pos
        self.pos += 1  # "["
        children = self.nested(closer="]", start=start)
        if self.peek() != "]":
            raise self.error("unclosed '['", start)
        self.pos += 1
        style: StyleRef | None = None
        if self.peek() == "(":
            style = self.style_ref()
        return Group(children=tuple(children), style=style)

    def style_ref(self) -> StyleRef | None:
        start = self.pos
        self.pos += 1  # "("
        words: list[str] = []
        word: list[str] = []

        def flush() -> None:
            if word:
                words.append("".join(word))
                word.clear()

        while True:
            ch = self.peek()
            if not ch:
                raise self.error("unclosed '('", start)
            if ch == ")":
                self.pos += 1
                break
            if ch in "[](":
                raise self.error(f"unexpected '{ch}' in style", self.pos)
            if ch == "$":
                flush()
                words.append("$" + self.variable_name())
                continue
            if ch.isspace():
                flush()
            else:
                word.append(ch)
            self.pos += 1
        flush()
        return StyleRef(tuple(words)) if words else None

    def paren(self) -> list[TemplateNode]:
        start = self.pos
        self.pos += 1  # "("
        children = self.nested(closer=")", start=start)
        if self.peek() != ")":
            raise self.error("unclosed '('", start)
        self.pos += 1
        return children


def parse_template(source: str, meta_variables: Iterable[str] = ()) -> Template:
    """Parse ``source`` into a ``Template``.

    Names in ``meta_variables`` become ``Meta`` nodes; all other references
    become ``Variable`` nodes. Raises ``TemplateSyntaxError`` on the first
    problem; no partial template is ever returned.
    """
    return _Parser(source, frozenset(meta_variables)).parse()


def escape_literal(text: str) -> str:
    """Escape ``text`` so it parses back as a single literal run."""
    return "".join("\\" + ch if ch in ESCAPABLE else ch for ch in text)


__all__ = [
    "ESCAPABLE",
    "MAX_NESTING",
    "parse_template",
    "escape_literal",
]
