"""
The Extras Record: the per-anchor container of non-semantic tokens.

A record belongs to exactly one CST node or virtual node. It maps position
labels to source-ordered tuples of extra tokens. Labels are validated against
the vocabulary the active strategy publishes for the owner's type. Records are
filled while the builder runs and sealed when it finishes; after that they are
read-only.
"""

from typing import Dict, FrozenSet, Iterable, Tuple

from escst.exceptions import CstError, ErrorCode, InvalidLabel
from escst.parser.core.tokens import Token


class ExtrasRecord:
    def __init__(self, owner_type: str, vocabulary: FrozenSet[str], strategy: str):
        self.owner_type = owner_type
        self.vocabulary = frozenset(vocabulary)
        self.strategy = strategy
        self._entries: Dict[str, Tuple[Token, ...]] = {}
        self._sealed = False

    def _check_label(self, label: str):
        if label not in self.vocabulary:
            raise InvalidLabel(label=label, node_type=self.owner_type, strategy=self.strategy, valid=", ".join(sorted(self.vocabulary)))

    def get(self, label: str) -> Tuple[Token, ...]:
        """Returns the extras stored under `label`, or an empty tuple."""
        self._check_label(label)
        return self._entries.get(label, ())

    def set(self, label: str, tokens: Iterable[Token]):
        """Stores `tokens` under `label`. Only allowed until the record is sealed."""
        self._check_label(label)
        if self._sealed:
            raise CstError(ErrorCode.RECORD_SEALED, node_type=self.owner_type, label=label)

        tokens = tuple(tokens)
        for token in tokens:
            if token.semantic:
                raise CstError(ErrorCode.SEMANTIC_TOKEN_IN_EXTRAS, span=token.span, raw=token.raw, label=label, node_type=self.owner_type)
        for previous, current in zip(tokens, tokens[1:]):
            if current.span.start <= previous.span.start:
                raise CstError(ErrorCode.EXTRAS_OUT_OF_ORDER, span=current.span, label=label, node_type=self.owner_type)

        if tokens:
            self._entries[label] = tokens
        else:
            self._entries.pop(label, None)

    def seal(self):
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def labels(self) -> Tuple[str, ...]:
        """Labels currently holding at least one token."""
        return tuple(self._entries)

    def tokens(self) -> Tuple[Token, ...]:
        """All tokens of the record in source order, whatever their label."""
        return tuple(sorted((token for entry in self._entries.values() for token in entry), key=lambda token: token.span.start))

    def is_empty(self) -> bool:
        return not self._entries

    def to_dict(self) -> Dict[str, list]:
        return {label: [token.raw for token in tokens] for label, tokens in self._entries.items()}

    def __eq__(self, other) -> bool:
        if not isinstance(other, ExtrasRecord):
            return NotImplemented
        return self.owner_type == other.owner_type and self.strategy == other.strategy and self._entries == other._entries

    def __repr__(self) -> str:
        return f"ExtrasRecord({self.owner_type!r}, {self.to_dict()!r})"
