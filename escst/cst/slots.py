from dataclasses import dataclass
from typing import Optional, Tuple, Union

from escst.parser.core.tokens import TokenKind

"""
Slot descriptors making up a slot schedule.

A schedule is the ordered list of places where a node emits semantic tokens,
recurses into children, or may hold extras. The builder drains tokens in
schedule order and the reconstructor emits in the same order.
"""


@dataclass(frozen=True)
class Label:
    """A position where extras may be attached to the owning record."""

    name: str


@dataclass(frozen=True)
class Text:
    """A fixed semantic token required by the grammar (keyword or punctuation)."""

    value: str
    kind: TokenKind = TokenKind.PUNCTUATION


@dataclass(frozen=True)
class Leaf:
    """A semantic token whose text is a scalar field of the node.

    `derives` lists scalar fields whose value is recomputed from that text and
    therefore needs no slot of its own.
    """

    field: str
    kind: TokenKind
    derives: Tuple[str, ...] = ()


@dataclass(frozen=True)
class Child:
    field: str
    wrap: bool = True


@dataclass(frozen=True)
class Items:
    field: str
    separator: Optional[str] = None
    wrap: bool = True


@dataclass(frozen=True)
class Virtual:
    """Replaces `field` by a virtual node of anchor role `role` wrapping its value."""

    field: str
    role: str


Slot = Union[Label, Text, Leaf, Child, Items, Virtual]


def keyword(value: str) -> Text:
    return Text(value=value, kind=TokenKind.KEYWORD)


def punct(value: str) -> Text:
    return Text(value=value, kind=TokenKind.PUNCTUATION)


def covered_fields(schedule: Tuple[Slot, ...]) -> Tuple[str, ...]:
    """Every AST field a schedule accounts for, in schedule order."""
    fields = []
    for slot in schedule:
        if isinstance(slot, Leaf):
            fields.append(slot.field)
            fields.extend(slot.derives)
        elif isinstance(slot, (Child, Items, Virtual)):
            fields.append(slot.field)
    return tuple(fields)


def labels_of(schedule: Tuple[Slot, ...]) -> Tuple[str, ...]:
    return tuple(slot.name for slot in schedule if isinstance(slot, Label))
