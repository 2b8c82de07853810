"""
The CST Builder: walks an AST in slot-schedule order while consuming the token
stream, and attaches every extra token to an anchor chosen by the Anchor
Resolver.
"""

import logging
from typing import Any, Callable, List, Optional, Sequence

from escst.config.config import BOUNDARY_LABELS, WRAPPED_FIELD
from escst.exceptions import TokenStreamMismatch
from escst.parser.core.classes import ASTNode, Program
from escst.parser.core.tokens import Token, TokenKind

from .anchor_resolver import Anchor
from .extras import ExtrasRecord
from .nodes import CstNode, VirtualNode
from .slots import Child, Items, Label, Leaf, Slot, Text, Virtual
from .strategies import Strategy

logger = logging.getLogger(__name__)


class CstBuilder:
    """
    Builds one CST from an AST and its complete token stream.

    The walk keeps a list of candidate anchors for the current gap. Every label
    slot reached adds a candidate; every semantic token expected by the schedule
    closes the gap: the extras in front of it are handed to the resolver, which
    picks the owner, and the candidate list starts over. A builder is single use.
    """

    def __init__(self, strategy: Strategy, tokens: Sequence[Token]):
        self.strategy = strategy
        self.resolver = strategy.resolver
        self.tokens = list(tokens)
        self._cursor = 0
        self._candidates: List[Anchor] = []
        self._records: List[ExtrasRecord] = []
        self._previous: Optional[Token] = None

    def build(self, ast: Program) -> CstNode:
        self._check_tiling()

        root = self._build_node(ast, wrap=True)

        # Whatever follows the last semantic token belongs to the last candidate.
        self._close_gap(ast.type)
        if self._cursor < len(self.tokens):
            token = self.tokens[self._cursor]
            raise TokenStreamMismatch(span=token.span, node_type=ast.type, details=f"unconsumed semantic token {token.describe()} after the end of the tree.")

        for record in self._records:
            record.seal()

        logger.debug("Built %s CST: %d record(s), %d token(s)", self.strategy.name, len(self._records), len(self.tokens))
        return root

    # --- Token stream handling ---

    def _check_tiling(self):
        """The upstream contract: tokens are contiguous from offset 0, with no gaps or overlaps."""
        offset = 0
        for token in self.tokens:
            if token.span.start != offset:
                raise TokenStreamMismatch(
                    span=token.span,
                    node_type="Program",
                    details=f"token {token.describe()} starts at offset {token.span.start}, expected {offset}; the stream does not tile the source.",
                )
            offset = token.span.end

    def _take_extras(self) -> List[Token]:
        extras = []
        while self._cursor < len(self.tokens) and self.tokens[self._cursor].is_extra:
            extras.append(self.tokens[self._cursor])
            self._cursor += 1
        return extras

    def _close_gap(self, node_type: str):
        extras = self._take_extras()
        if extras:
            where = f"after {self._previous.describe()}" if self._previous else "at the start of the input"
            anchor = self.resolver.choose(self._candidates, node_type, where, extras)
            anchor.record.set(anchor.label, extras)
        self._candidates = []

    def _offer(self, record: ExtrasRecord, label: str):
        self._candidates.append(Anchor(record.owner_type, label, record))

    def _expect(self, kind: TokenKind, text: str, node_type: str):
        self._close_gap(node_type)

        if self._cursor >= len(self.tokens):
            raise TokenStreamMismatch(node_type=node_type, details=f"expected {kind.value} {text!r} but the token stream is exhausted.")

        token = self.tokens[self._cursor]
        if token.kind != kind or token.raw != text:
            raise TokenStreamMismatch(span=token.span, node_type=node_type, details=f"expected {kind.value} {text!r} but found {token.describe()}.")

        self._previous = token
        self._cursor += 1

    # --- Tree walk ---

    def _new_record(self, owner_type: str) -> ExtrasRecord:
        record = self.strategy.new_record(owner_type)
        self._records.append(record)
        return record

    def _build_node(self, node: ASTNode, wrap: bool) -> CstNode:
        record = self._new_record(node.type)
        node_fields = self._walk(node.type, record, wrap, lambda name: getattr(node, name))
        return CstNode(type=node.type, node_fields=node_fields, extras=record, span=node.span)

    def _build_virtual(self, role: str, wrapped: Any) -> VirtualNode:
        record = self._new_record(role)
        node_fields = self._walk(role, record, True, lambda name: wrapped)
        return VirtualNode(anchor_role=role, wrapped=node_fields[WRAPPED_FIELD], extras=record)

    def _walk(self, owner_type: str, record: ExtrasRecord, wrap: bool, value_of: Callable[[str], Any]) -> dict:
        """Runs one schedule, returning the CST value of every field it covers."""
        schedule: Sequence[Slot] = self.strategy.slot_schedule(owner_type)
        node_fields = {}

        if wrap:
            self._offer(record, BOUNDARY_LABELS[0])

        for slot in schedule:
            if isinstance(slot, Label):
                self._offer(record, slot.name)
            elif isinstance(slot, Text):
                self._expect(slot.kind, slot.value, owner_type)
            elif isinstance(slot, Leaf):
                value = value_of(slot.field)
                self._expect(slot.kind, str(value), owner_type)
                node_fields[slot.field] = value
                for derived in slot.derives:
                    node_fields[derived] = value_of(derived)
            elif isinstance(slot, Child):
                child = value_of(slot.field)
                node_fields[slot.field] = self._build_node(child, slot.wrap) if child is not None else None
            elif isinstance(slot, Items):
                node_fields[slot.field] = self._build_items(owner_type, slot, value_of(slot.field))
            elif isinstance(slot, Virtual):
                node_fields[slot.field] = self._build_virtual(slot.role, value_of(slot.field))

        if wrap:
            self._offer(record, BOUNDARY_LABELS[1])
        return node_fields

    def _build_items(self, owner_type: str, slot: Items, items: Sequence[ASTNode]) -> List[CstNode]:
        built = []
        for index, item in enumerate(items):
            if index and slot.separator:
                self._expect(TokenKind.PUNCTUATION, slot.separator, owner_type)
            built.append(self._build_node(item, slot.wrap))
        return built


def build_cst(ast: Program, tokens: Sequence[Token], strategy: Strategy) -> CstNode:
    """Builds the CST of `ast` under `strategy`."""
    return CstBuilder(strategy, tokens).build(ast)
