"""
Inspection pipeline.

Stage order is fixed: the scanners may rename functions in the session and
every later stage has to see those names.

    entry check -> auto-analysis -> characterize -> strategy -> scanner
      -> reachability filter + tagging -> flattening -> optimization -> report
"""
import logging
from typing import Callable, Dict, List, Optional

from bin_inspector import config
from bin_inspector.backends.base import AnalysisSession, BinaryAnalysisBackend
from bin_inspector.backends.dispatcher import get_backend
from bin_inspector.core.characterize import characterize, ensure_entry_point
from bin_inspector.core.flattening import check_flat_cfg, rank_functions
from bin_inspector.core.optimization import infer_opt
from bin_inspector.core.report import Sample, assemble_report
from bin_inspector.core.scanners import find_imports, find_links
from bin_inspector.core.strategy import Strategy, select_strategy
from bin_inspector.core.syscalls import find_strip
from bin_inspector.core.tagging import check_functions
from bin_inspector.ml.classifier import OptimizationClassifier

logger = logging.getLogger(__name__)

SCANNERS: Dict[Strategy, Callable[[AnalysisSession], List[str]]] = {
    Strategy.IMPORT: find_imports,
    Strategy.LINK: find_links,
    Strategy.SYSCALL: find_strip,
}


def inspect_session(
    session: AnalysisSession,
    classifier: OptimizationClassifier,
    top: Optional[int] = None,
    window: Optional[int] = None,
) -> Sample:
    """
    Run every stage on an open session. The session is not closed here.

    Args:
        session: Freshly opened session, exclusively owned by this call.
        classifier: Optimization classifier.
        top: Number of highest-complexity functions sampled; config.yaml by default.
        window: Dispatcher look-back window; config.yaml by default.

    Returns:
        The finished report.
    """
    top = config.top_functions() if top is None else top
    window = config.dispatcher_window() if window is None else window

    ensure_entry_point(session)
    session.run_analysis()

    sample = characterize(session)
    strategy = select_strategy(sample.link_static, sample.stripped)
    logger.info(f"Using {strategy.value} scan")
    functions = SCANNERS[strategy](session)

    # Listed after the scan so renamed functions show up under their new names
    ranked = rank_functions(session.functions(), top)

    functions, params = check_functions(session, functions, sample.params)
    cff = check_flat_cfg(session, ranked, window)
    optimized = infer_opt(session, ranked, classifier)

    return assemble_report(sample, functions=functions, params=params, cff=cff, optimized=optimized)


def inspect(
    binary_path: str,
    classifier: OptimizationClassifier,
    engine_hint: Optional[str] = None,
    backend: Optional[BinaryAnalysisBackend] = None,
    top: Optional[int] = None,
) -> Sample:
    """Open a session on ``binary_path``, inspect it and always close the session."""
    backend = backend or get_backend(engine_hint)
    logger.info(f"Inspecting {binary_path} with {backend.name}")
    session = backend.open_session(binary_path)
    try:
        return inspect_session(session, classifier, top=top)
    finally:
        session.close()
