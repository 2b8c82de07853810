from typing import Dict

from escst.exceptions import CstError, ErrorCode

from .base import Strategy
from .extended_label import ExtendedLabelStrategy
from .virtual_node import VirtualNodeStrategy

# Process-wide, read-only after import.
VIRTUAL_NODE_STRATEGY = VirtualNodeStrategy()
EXTENDED_LABEL_STRATEGY = ExtendedLabelStrategy()

STRATEGIES: Dict[str, Strategy] = {strategy.name: strategy for strategy in (VIRTUAL_NODE_STRATEGY, EXTENDED_LABEL_STRATEGY)}


def get_strategy(name: str) -> Strategy:
    try:
        return STRATEGIES[name]
    except KeyError:
        raise CstError(ErrorCode.UNKNOWN_STRATEGY, name=name, available=", ".join(STRATEGIES)) from None
