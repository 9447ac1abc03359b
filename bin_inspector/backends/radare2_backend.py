import logging

import r2pipe

from .base import BinaryAnalysisBackend, PipeSession
from bin_inspector.errors import BackendUnavailable, InspectionError

logger = logging.getLogger(__name__)


class Radare2Session(PipeSession):
    """radare2 session driven through r2pipe."""

    def __init__(self, binary_path: str, pipe):
        super().__init__(binary_path, pipe, engine="radare2")


class Radare2Backend(BinaryAnalysisBackend):
    """
    radare2 backend. Each session spawns its own r2 process; analysis is left
    to the caller so the entry-point check runs first.
    """

    name = "radare2"

    def open_session(self, binary_path: str) -> Radare2Session:
        try:
            r2 = r2pipe.open(binary_path)
        except Exception as e:
            raise BackendUnavailable(f"Cannot open {binary_path} with radare2: {e}") from e
        session = Radare2Session(binary_path, r2)
        try:
            session.cmd("e scr.color=0")  # Disable color
        except InspectionError:
            session.close()
            raise
        logger.debug(f"Opened radare2 session on {binary_path}")
        return session
