"""
Control-flow-flattening detection.

A flattened function routes every block transition through one dispatcher
block: the dispatcher is the most-entered block, all of its predecessors jump
to it unconditionally, and it jumps unconditionally back towards the top of
the function.

Node order is the order in which blocks first appear in the backend's
rendering (networkx keeps insertion order), which makes both the in-degree
tie-break and the "leading blocks" window deterministic.
"""
import logging
from enum import Enum
from typing import Iterable, List, Optional

import networkx as nx

from bin_inspector.backends.base import AnalysisSession
from bin_inspector.backends.records import FunctionRecord

logger = logging.getLogger(__name__)

ARROW = "-->"
CONDITION_SEPARATOR = ":"


class JumpType(Enum):
    UNCONDITIONAL = 0
    CONDITIONAL = 1


def parse_block_graph(text: str) -> nx.DiGraph:
    """
    Parse ``<src> --> <dst>[: <cond-label>]`` lines into a directed graph.

    Edges carrying a condition label are CONDITIONAL. Lines without an arrow,
    or with an empty endpoint, are ignored.
    """
    graph = nx.DiGraph()
    for line in text.splitlines():
        idx = line.find(ARROW)
        if idx < 0:
            continue
        src = line[:idx].strip()
        dst = line[idx + len(ARROW):]
        if CONDITION_SEPARATOR in dst:
            dst = dst.split(CONDITION_SEPARATOR, 1)[0]
            jump = JumpType.CONDITIONAL
        else:
            jump = JumpType.UNCONDITIONAL
        dst = dst.strip()
        if not src or not dst:
            continue
        graph.add_edge(src, dst, jump=jump)
    return graph


def find_dispatcher(graph: nx.DiGraph) -> Optional[str]:
    """Node with the most incoming edges; first in node order on ties."""
    if graph.number_of_nodes() == 0:
        return None
    # max() keeps the first maximal element
    return max(graph.nodes, key=graph.in_degree)


def is_flattened(graph: nx.DiGraph, window: int = 5) -> bool:
    dispatcher = find_dispatcher(graph)
    if dispatcher is None:
        return False

    # Conditional fan-in is ordinary branching
    for _, _, jump in graph.in_edges(dispatcher, data="jump"):
        if jump == JumpType.CONDITIONAL:
            return False

    for node in list(graph.nodes)[:window]:
        if graph.has_edge(dispatcher, node) and graph.edges[dispatcher, node]["jump"] == JumpType.UNCONDITIONAL:
            return True
    return False


def rank_functions(functions: Iterable[FunctionRecord], top: int = 25) -> List[FunctionRecord]:
    """The ``top`` highest-complexity functions, most complex first."""
    ranked = sorted(functions, key=lambda f: f.cc)
    ranked.reverse()
    return ranked[:top]


def check_flat_cfg(session: AnalysisSession, ranked: Iterable[FunctionRecord], window: int = 5) -> List[str]:
    """
    Names of the ranked functions whose block graph looks flattened.

    Args:
        session: The live session.
        ranked: Output of ``rank_functions``.
        window: Number of leading blocks the dispatcher may jump back to.

    Returns:
        Flagged names in ranking order, each at most once.
    """
    flagged: List[str] = []
    for fcn in ranked:
        if not fcn.name or fcn.name in flagged:
            continue
        graph = parse_block_graph(session.block_graph(fcn.name))
        if graph.number_of_nodes() == 0:
            logger.debug(f"{fcn.name}: empty block graph, skipped")
            continue
        if is_flattened(graph, window):
            logger.debug(f"{fcn.name}: dispatcher {find_dispatcher(graph)}")
            flagged.append(fcn.name)
    logger.info(f"Flattening detected in {len(flagged)} function(s)")
    return flagged
