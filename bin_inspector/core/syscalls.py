"""
Syscall discovery for statically linked, stripped binaries.

With no symbol names left, functions are identified by the raw syscalls they
issue and renamed in the backend session to ``<function>_<syscall>``. Those
renames persist: later stages (reachability, tagging, flattening) query the
new names.

``sigaction`` gets special treatment: the libc ``signal()`` wrapper installs
its handler through ``sigaction`` and never traps itself, so callers of a
``sigaction`` site that contain no trap instruction are renamed
``<caller>_signal``.
"""
import logging
from typing import Dict, Iterable, List

from bin_inspector.backends.base import AnalysisSession
from bin_inspector.backends.records import SyscallRecord
from bin_inspector.constants import (
    ARCH_SYSCALL_PREFIX,
    SENSITIVE_FUNCTIONS,
    SIGNAL_SUFFIX,
    SYSCALL_MNEMONICS,
)

logger = logging.getLogger(__name__)


def sensitive_syscalls(session: AnalysisSession, targets: Iterable[str] = SENSITIVE_FUNCTIONS) -> List[SyscallRecord]:
    """Syscall sites whose name contains a target, excluding ``arch*`` wrappers."""
    targets = tuple(targets)
    return [
        sys for sys in session.syscalls()
        if not sys.name.startswith(ARCH_SYSCALL_PREFIX) and any(fun in sys.name for fun in targets)
    ]


def rename_with_suffix(session: AnalysisSession, fcn_name: str, suffix: str) -> str:
    """
    Rename ``fcn_name`` to ``<fcn_name>_<suffix>`` unless its suffix chain
    already holds that suffix, so repeated runs on one session do not stack
    suffixes (``f_ptrace_prctl`` is left alone for both ptrace and prctl).
    """
    if f"_{suffix}_" in f"{fcn_name}_":
        logger.debug(f"{fcn_name} already tagged with {suffix}")
        return fcn_name
    new_name = f"{fcn_name}_{suffix}"
    session.rename_function(new_name, fcn_name)
    return new_name


def find_signal_wrappers(session: AnalysisSession, sigaction_fcn: str) -> List[str]:
    """
    Rename the trap-free callers of ``sigaction_fcn`` to ``<caller>_signal``.

    Callers are deduplicated by function address and visited in address order.

    Returns:
        The new names, in caller-address order.
    """
    callers: Dict[int, str] = {}
    for xref in session.xrefs_to(sigaction_fcn):
        if xref.fcn_addr is None or not xref.fcn_name:
            continue
        callers.setdefault(xref.fcn_addr, xref.fcn_name)

    wrappers = []
    for addr in sorted(callers):
        caller = callers[addr]
        disas = session.flat_disassembly(caller)
        if any(mnemonic in disas for mnemonic in SYSCALL_MNEMONICS):
            # issues its own syscall, already found by the syscall scan
            logger.debug(f"{caller} traps itself, not a signal wrapper")
            continue
        wrappers.append(rename_with_suffix(session, caller, SIGNAL_SUFFIX))
    return wrappers


def find_strip(session: AnalysisSession, targets: Iterable[str] = SENSITIVE_FUNCTIONS) -> List[str]:
    """
    Rename every function holding a sensitive syscall and collect the new names.

    Args:
        session: The live session; renames are applied to it.
        targets: Syscall names to look for.

    Returns:
        Names in discovery order: each syscall site, followed by the signal
        wrappers found for it when the site is a ``sigaction``.
    """
    matches: List[str] = []

    def record(name: str) -> None:
        if name not in matches:
            matches.append(name)

    for sys in sensitive_syscalls(session, targets):
        fcn_name = session.function_at(sys.addr)
        renamed = rename_with_suffix(session, fcn_name, sys.name)
        record(renamed)

        if "sigaction" in sys.name:
            for wrapper in find_signal_wrappers(session, renamed):
                record(wrapper)

    logger.info(f"Syscall scan identified {len(matches)} function(s)")
    return matches
