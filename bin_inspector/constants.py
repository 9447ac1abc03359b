"""
Constant lookup tables shared by the pipeline stages.

Both tables are built once at import time and never mutated afterwards.
"""
import re
from types import MappingProxyType
from typing import Mapping, Pattern, Tuple

# Library functions / syscalls commonly used for anti-debugging.
SENSITIVE_FUNCTIONS: Tuple[str, ...] = (
    "madvise",
    "prctl",
    "signal",
    "sigaction",
    "process_vm_writev",
    "ptrace",
)

# (pattern, tag) pairs matched against decompiled callers.
# Leading "[0x]*" tolerates both "ptrace(0," and "ptrace(0x0,".
SIGNATURE_PATTERNS: Tuple[Tuple[str, str], ...] = (
    (r"signal\s*\([0x]*5,", "SIGNAL_SIGTRAP"),
    (r"sigaction\s*\([0x]*5,", "SIGACT_SIGTRAP"),
    (r"ptrace\s*\([0x]*0,", "PTRACE_TRACEME"),
    (r"ptrace\s*\([0x]*1,", "PTRACE_PEEKTEXT"),
    (r"ptrace\s*\([0x]*4,", "PTRACE_POKETEXT"),
    (r"ptrace\s*\([0x]*2,", "PTRACE_PEEKDATA"),
    (r"ptrace\s*\([0x]*5,", "PTRACE_POKEDATA"),
    (r"ptrace\s*\(0x10,", "PTRACE_ATTACH"),
    (r"ptrace\s*\(0x4206,", "PTRACE_SEIZE"),
    (r"prctl\s*\([0x]*4,", "PR_SET_DUMPABLE"),
    (r"prctl\s*\(0xf,", "PR_SET_NAME"),
    (r"madvise[^\n]*, 0x10\)", "MADV_DONTDUMP"),
)

SIGNATURES: Mapping[str, Pattern[str]] = MappingProxyType(
    {tag: re.compile(pattern) for pattern, tag in SIGNATURE_PATTERNS}
)

# Syscall names with this prefix are generic/indirect wrappers.
ARCH_SYSCALL_PREFIX = "arch"

# Mnemonics that mark a function as issuing a syscall itself.
SYSCALL_MNEMONICS: Tuple[str, ...] = ("svc", "syscall")

SIGNAL_SUFFIX = "signal"

ENTRY_SYMBOL = "entry0"
