from .anchor_resolver import Anchor, AnchorResolver, Gap
from .builder import CstBuilder, build_cst
from .extras import ExtrasRecord
from .nodes import CstNode, VirtualNode
from .projector import project_ast
from .reconstructor import SourceReconstructor, reconstruct_source
from .strategies import EXTENDED_LABEL_STRATEGY, STRATEGIES, VIRTUAL_NODE_STRATEGY, Strategy, get_strategy
