"""
Symbol-name scanners for binaries that still carry names.
"""
import logging
from typing import Iterable, List

from bin_inspector.backends.base import AnalysisSession
from bin_inspector.constants import SENSITIVE_FUNCTIONS

logger = logging.getLogger(__name__)


def find_imports(session: AnalysisSession, targets: Iterable[str] = SENSITIVE_FUNCTIONS) -> List[str]:
    """
    Imported symbols whose flag name contains a target name.

    Substring matching tolerates decorations such as ``sym.imp.ptrace`` or
    versioned names like ``ptrace@GLIBC_2.2.5``.
    """
    targets = tuple(targets)
    matches = [
        sym.flagname for sym in session.symbols()
        if sym.flagname and any(fun in sym.flagname for fun in targets)
    ]
    logger.info(f"Import scan matched {len(matches)} symbol(s)")
    return matches


def find_links(session: AnalysisSession, targets: Iterable[str] = SENSITIVE_FUNCTIONS) -> List[str]:
    """
    Statically linked copies of target functions, matched by name suffix
    (``sym.__libc_ptrace`` style prefixes are library specific).
    """
    targets = tuple(targets)
    matches = [
        fcn.name for fcn in session.functions()
        if any(fcn.name.endswith(fun) for fun in targets)
    ]
    logger.info(f"Link scan matched {len(matches)} function(s)")
    return matches
