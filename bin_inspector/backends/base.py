import logging
from abc import ABC, abstractmethod
from typing import Any, List

from bin_inspector import config
from bin_inspector.backends.records import (
    BinaryInfo,
    EnclosingFunction,
    FunctionRecord,
    SymbolRecord,
    SyscallRecord,
    XrefRecord,
    parse_record,
    parse_records,
)
from bin_inspector.constants import ENTRY_SYMBOL
from bin_inspector.errors import AnalysisFailed, QueryError, RenameFailed

logger = logging.getLogger(__name__)


class AnalysisSession(ABC):
    """
    One live, stateful connection to the analysis backend for a single binary.

    Renames performed through a session are visible to every later query on
    the same session, so the pipeline threads one session through all stages.
    Concrete sessions only implement the raw ``cmd``/``cmdj``/``close``
    transport; the typed queries below are shared.
    """

    engine = "generic"

    def __init__(self, binary_path: str):
        self.binary_path = binary_path

    @abstractmethod
    def cmd(self, command: str) -> str:
        """
        Run a command and return its text output.
        Args:
            command: Backend command string.
        Returns:
            The raw text answer (possibly empty).
        """
        pass

    @abstractmethod
    def cmdj(self, command: str) -> Any:
        """
        Run a command and return its decoded JSON output.
        Args:
            command: Backend command string, normally ending in ``j``.
        Returns:
            The decoded JSON value, or None if the backend printed nothing parseable.
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Terminate the backend process."""
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def decompiler_modes(self) -> List[str]:
        return config.decompilers(self.engine)

    def has_entry_point(self) -> bool:
        entries = self.cmdj("iej")
        return isinstance(entries, list) and len(entries) > 0

    def run_analysis(self) -> None:
        """Full auto-analysis (``aaa``); must precede every function-level query."""
        try:
            self.cmd("aaa")
        except QueryError as e:
            raise AnalysisFailed(f"Auto-analysis of {self.binary_path} failed: {e}") from e

    def binary_info(self) -> BinaryInfo:
        data = self.cmdj("ij")
        if not isinstance(data, dict):
            raise QueryError("ij", "expected an object")
        bininfo = data.get("bin") or {}
        fields = {k: v for k, v in bininfo.items() if k in ("arch", "bits", "compiler", "stripped", "static") and v is not None}
        fields["name"] = (data.get("core") or {}).get("file") or ""
        return parse_record("ij", fields, BinaryInfo)

    def section_count(self) -> int:
        sections = self.cmdj("iSj")
        if not isinstance(sections, list):
            raise QueryError("iSj", "expected a list of sections")
        return len(sections)

    def symbols(self) -> List[SymbolRecord]:
        return parse_records("isj", self.cmdj("isj"), SymbolRecord)

    def functions(self) -> List[FunctionRecord]:
        return parse_records("aflj", self.cmdj("aflj"), FunctionRecord)

    def syscalls(self) -> List[SyscallRecord]:
        data = self.cmdj("/asj")
        # radare2 wraps the hits in {"results": [...]}, older builds return the bare list
        if isinstance(data, dict):
            data = data.get("results")
        return parse_records("/asj", data, SyscallRecord)

    def function_at(self, addr: int) -> str:
        command = f"afdj @ {addr}"
        return parse_record(command, self.cmdj(command), EnclosingFunction).name

    def xrefs_to(self, name: str) -> List[XrefRecord]:
        command = f"axtj @ {name}"
        return parse_records(command, self.cmdj(command), XrefRecord)

    def flat_disassembly(self, name: str) -> str:
        """First column (mnemonic) of every instruction of ``name``, one per line."""
        return self.cmd(f"pif @ {name} ~[0]")

    def entry_reachable_from(self, name: str) -> bool:
        return bool(self.cmd(f"axg @ {name} ~{ENTRY_SYMBOL}").strip())

    def decompile(self, name: str, mode: str) -> str:
        return self.cmd(f"{mode} @ {name}")

    def block_graph(self, name: str) -> str:
        """Textual block-flow rendering, one ``<src> --> <dst>[: <cond>]`` edge per line."""
        return self.cmd(f"agfm @ {name}")

    def rename_function(self, new_name: str, old_name: str) -> None:
        self.cmd(f"afn {new_name} {old_name}")
        renamed = self.cmdj(f"afij @ {new_name}")
        if not renamed or not isinstance(renamed, list) or not isinstance(renamed[0], dict):
            raise RenameFailed(new_name, old_name)
        if renamed[0].get("name") != new_name:
            raise RenameFailed(new_name, old_name)
        logger.debug(f"Renamed {old_name} -> {new_name}")


class PipeSession(AnalysisSession):
    """Session backed by an r2pipe/rzpipe-compatible object (``cmd``, ``cmdj``, ``quit``)."""

    def __init__(self, binary_path: str, pipe, engine: str = "generic"):
        super().__init__(binary_path)
        self.engine = engine
        self._pipe = pipe
        self._closed = False

    def cmd(self, command: str) -> str:
        try:
            out = self._pipe.cmd(command)
        except (OSError, ValueError) as e:
            raise QueryError(command, str(e)) from e
        return out if isinstance(out, str) else ""

    def cmdj(self, command: str) -> Any:
        try:
            return self._pipe.cmdj(command)
        except (OSError, ValueError) as e:
            raise QueryError(command, str(e)) from e

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._pipe.quit()


class BinaryAnalysisBackend(ABC):
    """
    Backend factory shielding the pipeline from radare2/rizin differences.
    All concrete backends (Radare2Backend, RizinBackend) implement ``open_session``.
    """

    name = "generic"

    @abstractmethod
    def open_session(self, binary_path: str) -> AnalysisSession:
        """
        Spawn the backend on a binary.
        Args:
            binary_path: Path to the binary file.
        Returns:
            A fresh session owned by the caller, who must close it.
        Raises:
            BackendUnavailable: the backend could not be started.
        """
        pass
