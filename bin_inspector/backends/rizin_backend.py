import logging

import rzpipe

from .base import BinaryAnalysisBackend, PipeSession
from bin_inspector.errors import BackendUnavailable, InspectionError

logger = logging.getLogger(__name__)


class RizinSession(PipeSession):
    """Rizin session driven through rzpipe."""

    def __init__(self, binary_path: str, pipe):
        super().__init__(binary_path, pipe, engine="rizin")


class RizinBackend(BinaryAnalysisBackend):
    """Rizin backend, same command surface as radare2 for the queries used here."""

    name = "rizin"

    def open_session(self, binary_path: str) -> RizinSession:
        try:
            rz = rzpipe.open(binary_path)
        except Exception as e:
            raise BackendUnavailable(f"Cannot open {binary_path} with rizin: {e}") from e
        session = RizinSession(binary_path, rz)
        try:
            session.cmd("e scr.color=0")
        except InspectionError:
            session.close()
            raise
        logger.debug(f"Opened rizin session on {binary_path}")
        return session
