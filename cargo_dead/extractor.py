"""Reference extractor — collects crate roots referenced from Rust source.

Uses tree-sitter with the Rust grammar. A reference is the leading segment of
a qualified path (``foo`` in ``foo::bar::Baz``), wherever the path occurs:
expressions, types, attributes, ``use`` trees, nested modules and function
bodies. Macro and attribute arguments are token trees rather than parsed
syntax, so ``ident ::`` token pairs inside them are picked up as well.
"""

from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable

import tree_sitter_rust as tsrust
from tree_sitter import Language, Node, Parser

_RUST_LANGUAGE = Language(tsrust.language())

# Nodes carrying a ``path`` field that ends in the crate root.
_SCOPED_NODES = frozenset({"scoped_identifier", "scoped_type_identifier", "scoped_use_list"})

_ROOT_NODES = frozenset({"identifier", "type_identifier"})


@runtime_checkable
class ReferenceExtractor(Protocol):
    """Interface every source-language extractor must satisfy.

    ``extract`` returns ``None`` when the source cannot be parsed, so callers
    can tell a skipped file from one that references nothing.
    """

    def extract(self, source: str) -> set[str] | None: ...


class RustReferenceExtractor:
    """Extract leading path segments from one Rust source file."""

    def __init__(self) -> None:
        self._parser = Parser(_RUST_LANGUAGE)

    def extract(self, source: str) -> set[str] | None:
        """Return the path roots referenced in *source*.

        Returns ``None`` if the file does not parse cleanly; nothing from it
        is used. This includes Rust 2024 items the installed grammar does not
        know yet, such as ``safe fn`` inside ``unsafe extern "C" { ... }``.
        """
        tree = self._parser.parse(source.encode("utf-8"))
        root = tree.root_node
        if root.has_error:
            return None

        roots: set[str] = set()
        for node in self._walk_tree(root):
            if node.type in _SCOPED_NODES:
                if not self._is_nested_use_path(node):
                    self._add(roots, self._leading_segment(node))
            elif node.type == "use_declaration":
                argument = node.child_by_field_name("argument")
                if argument is not None:
                    roots.update(self._use_tree_roots(argument))
            elif node.type == "extern_crate_declaration":
                name = node.child_by_field_name("name")
                if name is not None:
                    roots.add(_text(name))
            elif node.type == "token_tree":
                roots.update(self._token_tree_roots(node))
        return roots

    def _walk_tree(self, node: Node) -> Iterator[Node]:
        """Yield every node in the tree, depth first."""
        stack = [node]
        while stack:
            current = stack.pop()
            yield current
            stack.extend(reversed(current.children))

    def _leading_segment(self, node: Node) -> str | None:
        """Follow the ``path`` chain of a scoped node down to its root."""
        while True:
            if node.type in _SCOPED_NODES:
                path = node.child_by_field_name("path")
                if path is None:
                    # Global path (``::foo::bar``); the root is this node's name.
                    if node.type == "scoped_use_list":
                        return None
                    name = node.child_by_field_name("name")
                    return _text(name) if name is not None else None
                node = path
            elif node.type == "generic_type":
                inner = node.child_by_field_name("type")
                if inner is None:
                    return None
                node = inner
            elif node.type in _ROOT_NODES:
                return _text(node)
            else:
                # self / super / crate / qualified ``<T as Trait>`` paths
                return None

    def _is_nested_use_path(self, node: Node) -> bool:
        """True for ``bar::baz`` in ``use foo::{bar::baz}``: relative to ``foo``."""
        parent = node.parent
        while parent is not None and (
            parent.type in _SCOPED_NODES or parent.type in ("use_as_clause", "use_wildcard")
        ):
            parent = parent.parent
        if parent is None or parent.type != "use_list":
            return False
        grandparent = parent.parent
        return grandparent is not None and grandparent.type == "scoped_use_list"

    def _use_tree_roots(self, node: Node) -> set[str]:
        roots: set[str] = set()
        if node.type == "identifier":
            roots.add(_text(node))
        elif node.type in _SCOPED_NODES:
            self._add(roots, self._leading_segment(node))
        elif node.type == "use_as_clause":
            path = node.child_by_field_name("path")
            if path is not None:
                roots.update(self._use_tree_roots(path))
        elif node.type in ("use_list", "use_wildcard"):
            for child in node.named_children:
                roots.update(self._use_tree_roots(child))
        return roots

    def _token_tree_roots(self, node: Node) -> set[str]:
        """Collect ``ident ::`` pairs that start a path inside a token tree."""
        roots: set[str] = set()
        children = node.children
        for i, child in enumerate(children[:-1]):
            if child.type != "identifier" or children[i + 1].type != "::":
                continue
            if i > 0 and children[i - 1].type == "::":
                continue
            roots.add(_text(child))
        return roots

    @staticmethod
    def _add(roots: set[str], name: str | None) -> None:
        if name:
            roots.add(name)


def _text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")
