"""Template tree datatypes.

Nodes are frozen so equal format strings parse into equal trees.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Literal:
    text: str


@dataclass(frozen=True)
class Variable:
    """Value variable, resolved through computed values then meta values."""

    name: str


@dataclass(frozen=True)
class Meta:
    """Meta variable, resolved by static substitution only."""

    name: str


@dataclass(frozen=True)
class StyleRef:
    """Style reference of a group: literal words and ``$name`` lookups, in order."""

    words: tuple[str, ...]

    @property
    def variables(self) -> tuple[str, ...]:
        return tuple(word[1:] for word in self.words if word.startswith("$"))


@dataclass(frozen=True)
class Group:
    """Conditionally rendered sub-template sharing one optional style."""

    children: tuple["TemplateNode", ...]
    style: StyleRef | None = None


TemplateNode = Literal | Variable | Meta | Group


@dataclass(frozen=True)
class Template:
    """Parsed format string."""

    source: str
    nodes: tuple[TemplateNode, ...]

    def variables(self) -> frozenset[str]:
        """Names of every value and meta variable referenced anywhere."""
        out: set[str] = set()
        stack: list[TemplateNode] = list(self.nodes)
        while stack:
            node = stack.pop()
            if isinstance(node, (Variable, Meta)):
                out.add(node.name)
            elif isinstance(node, Group):
                stack.extend(node.children)
        return frozenset(out)

    def style_variables(self) -> frozenset[str]:
        out: set[str] = set()
        stack: list[TemplateNode] = list(self.nodes)
        while stack:
            node = stack.pop()
            if isinstance(node, Group):
                if node.style is not None:
                    out.update(node.style.variables)
                stack.extend(node.children)
        return frozenset(out)


@dataclass(frozen=True)
class Segment:
    """One piece of rendered output: text plus an opaque style string."""

    text: str
    style: str | None = None


__all__ = [
    "Literal",
    "Variable",
    "Meta",
    "StyleRef",
    "Group",
    "TemplateNode",
    "Template",
    "Segment",
]
