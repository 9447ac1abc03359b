import logging
from typing import FrozenSet, Iterable, List, Mapping, Pattern, Set, Tuple

from bin_inspector.backends.base import AnalysisSession
from bin_inspector.constants import SIGNATURES

logger = logging.getLogger(__name__)


def filter_reachable(session: AnalysisSession, functions: Iterable[str]) -> List[str]:
    """Keep the functions with a call path to the entry point, order preserved."""
    kept = []
    for fcn in functions:
        if session.entry_reachable_from(fcn):
            kept.append(fcn)
        else:
            logger.debug(f"{fcn} is not reachable from the entry point")
    return kept


def match_signatures(text: str, signatures: Mapping[str, Pattern[str]] = SIGNATURES) -> Set[str]:
    return {tag for tag, regex in signatures.items() if regex.search(text)}


def tag_callers(
    session: AnalysisSession,
    functions: Iterable[str],
    params: Iterable[str] = (),
    signatures: Mapping[str, Pattern[str]] = SIGNATURES,
) -> FrozenSet[str]:
    """
    Decompile every caller of every function and collect the signature tags found.

    Each caller is rendered with all decompiler modes of the session; a match
    in any rendering counts. Tags already in ``params`` are kept.
    """
    tags = set(params)
    modes = session.decompiler_modes
    for fcn in functions:
        for xref in session.xrefs_to(fcn):
            if not xref.fcn_name:
                continue
            for mode in modes:
                found = match_signatures(session.decompile(xref.fcn_name, mode), signatures)
                if found - tags:
                    logger.debug(f"{xref.fcn_name} ({mode}) -> {sorted(found - tags)}")
                tags |= found
    return frozenset(tags)


def check_functions(
    session: AnalysisSession,
    functions: Iterable[str],
    params: Iterable[str] = (),
) -> Tuple[List[str], FrozenSet[str]]:
    """
    Reachability filter followed by caller tagging.

    Returns:
        (reachable functions, accumulated tags)
    """
    reachable = filter_reachable(session, functions)
    tags = tag_callers(session, reachable, params)
    logger.info(f"{len(reachable)} reachable function(s), tags: {sorted(tags)}")
    return reachable, tags
