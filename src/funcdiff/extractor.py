"""Function inventory extraction from Java source.

Java text is parsed with tree-sitter. Every class, interface, enum and
record declaration is visited, and each method declared directly in its
body is recorded under ``<TypeName>.<methodName>``. Parameter lists are not
part of the key, so overloads share one entry whose signature and body sets
hold every variant.

Signatures and bodies are rendered by a token printer: leaf tokens joined by
single spaces, so layout-only edits compare equal. Comments inside a body
are kept as tokens; signatures drop them.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set

import tree_sitter_java
from tree_sitter import Language, Node, Parser

from .errors import ParseError

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tree_sitter_java.language())

TYPE_DECLARATIONS = frozenset(
    {
        "class_declaration",
        "interface_declaration",
        "enum_declaration",
        "record_declaration",
    }
)
COMMENT_NODES = frozenset({"line_comment", "block_comment"})
ANNOTATION_NODES = frozenset({"annotation", "marker_annotation"})
# Printed verbatim so whitespace inside literals stays significant
ATOMIC_NODES = frozenset({"string_literal", "character_literal", "text_block"})


@dataclass
class FunctionVariants:
    """All signature and body forms seen for one function key."""

    signatures: Set[str] = field(default_factory=set)
    bodies: Set[str] = field(default_factory=set)


@dataclass
class FunctionInventory:
    """Per-file mapping from qualified function name to its variants."""

    functions: Dict[str, FunctionVariants] = field(default_factory=dict)
    diagnostics: List[ParseError] = field(default_factory=list)

    def add(self, key: str, signature: str, body: Optional[str]) -> None:
        variants = self.functions.setdefault(key, FunctionVariants())
        variants.signatures.add(signature)
        if body is not None:
            variants.bodies.add(body)

    def keys(self) -> Set[str]:
        return set(self.functions)

    def __getitem__(self, key: str) -> FunctionVariants:
        return self.functions[key]

    def __contains__(self, key: object) -> bool:
        return key in self.functions

    def __len__(self) -> int:
        return len(self.functions)

    @property
    def parse_failed(self) -> bool:
        return bool(self.diagnostics)


class FunctionExtractor:
    """Builds function inventories from Java source text."""

    def __init__(self) -> None:
        # tree-sitter parsers must not be shared between threads
        self._local = threading.local()
        self._handlers = {node_type: self._visit_type_declaration for node_type in TYPE_DECLARATIONS}

    @property
    def parser(self) -> Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = Parser(JAVA_LANGUAGE)
            self._local.parser = parser
        return parser

    def extract(self, source: Optional[str]) -> FunctionInventory:
        """Parse ``source`` and collect its functions.

        Absent or blank input gives an empty inventory. Unparseable input
        also gives an empty inventory, with the failure recorded in
        ``diagnostics`` instead of raised.
        """
        inventory = FunctionInventory()
        if source is None or not source.strip():
            return inventory

        try:
            tree = self.parser.parse(source.encode("utf-8"))
        except ValueError as e:
            self._record_failure(inventory, ParseError(str(e)))
            return inventory

        root = tree.root_node
        if root.has_error:
            self._record_failure(inventory, _syntax_error(root))
            return inventory

        for node in _walk(root):
            handler = self._handlers.get(node.type)
            if handler is not None:
                handler(node, inventory)

        logger.debug("Extracted functions", extra={"functions": len(inventory)})
        return inventory

    def _record_failure(self, inventory: FunctionInventory, error: ParseError) -> None:
        logger.warning("Failed to parse Java content: %s", error.message, extra=error.details)
        inventory.diagnostics.append(error)

    def _visit_type_declaration(self, node: Node, inventory: FunctionInventory) -> None:
        name_node = node.child_by_field_name("name")
        body = node.child_by_field_name("body")
        if name_node is None or body is None:
            return

        type_name = _text(name_node)
        for method in _member_methods(body):
            method_name = method.child_by_field_name("name")
            if method_name is None:
                continue
            block = method.child_by_field_name("body")
            inventory.add(
                f"{type_name}.{_text(method_name)}",
                render_signature(method),
                render_tokens(block) if block is not None else None,
            )


def _member_methods(body: Node) -> Iterator[Node]:
    """Yield methods declared directly in a type body."""
    for child in body.named_children:
        if child.type == "method_declaration":
            yield child
        elif child.type == "enum_body_declarations":
            for member in child.named_children:
                if member.type == "method_declaration":
                    yield member


def render_signature(method: Node) -> str:
    """Render modifiers, type parameters, return type, name, parameters and throws."""
    tokens: List[str] = []
    for child in method.children:
        if child.type == "block" or child.type == ";" or child.type in COMMENT_NODES:
            continue
        if child.type == "modifiers":
            for modifier in child.children:
                if modifier.type in ANNOTATION_NODES or modifier.type in COMMENT_NODES:
                    continue
                _collect_tokens(modifier, tokens)
            continue
        _collect_tokens(child, tokens)
    return " ".join(tokens)


def render_tokens(node: Node, keep_comments: bool = True) -> str:
    """Render a subtree as its tokens joined by single spaces."""
    tokens: List[str] = []
    _collect_tokens(node, tokens, keep_comments)
    return " ".join(tokens)


def _collect_tokens(node: Node, tokens: List[str], keep_comments: bool = False) -> None:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type in COMMENT_NODES:
            if keep_comments:
                text = _text(current).strip()
                if text:
                    tokens.append(text)
            continue
        if current.child_count == 0 or current.type in ATOMIC_NODES:
            text = _text(current)
            if text:
                tokens.append(text)
            continue
        stack.extend(reversed(current.children))


def _walk(root: Node) -> Iterator[Node]:
    """Pre-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def _syntax_error(root: Node) -> ParseError:
    """Describe the first ERROR or MISSING node of a broken tree."""
    stack = [root]
    while stack:
        node = stack.pop()
        if node.is_error:
            return ParseError("syntax error", line=node.start_point[0] + 1)
        if node.is_missing:
            return ParseError(f"missing {node.type}", line=node.start_point[0] + 1)
        stack.extend(child for child in reversed(node.children) if child.has_error or child.is_missing)
    return ParseError("syntax error")


def _text(node: Node) -> str:
    return node.text.decode("utf-8") if node.text else ""
