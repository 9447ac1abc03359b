from enum import Enum


class Strategy(Enum):
    IMPORT = "import"
    LINK = "link"
    SYSCALL = "syscall"


def select_strategy(link_static: bool, stripped: bool) -> Strategy:
    """
    Dynamically linked binaries keep an import table; static ones keep their
    symbols unless stripped, in which case only raw syscalls are left.
    """
    if not link_static:
        return Strategy.IMPORT
    if not stripped:
        return Strategy.LINK
    return Strategy.SYSCALL
