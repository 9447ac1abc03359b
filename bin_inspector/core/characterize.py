import logging

from bin_inspector.backends.base import AnalysisSession
from bin_inspector.core.report import Sample
from bin_inspector.errors import MissingEntryPoint

logger = logging.getLogger(__name__)

# More section headers than this means the binary was not sstripped
RICH_SECTION_THRESHOLD = 3


def ensure_entry_point(session: AnalysisSession) -> None:
    """Precondition checked before auto-analysis."""
    if not session.has_entry_point():
        raise MissingEntryPoint(f"No entry point found in {session.binary_path}")


def characterize(session: AnalysisSession) -> Sample:
    """
    Build the initial Sample from the binary metadata.

    Args:
        session: An analysed backend session.

    Returns:
        A Sample with name/arch/bits/compiler/stripped/link_static/sect_header set
        and every pipeline-owned field empty.
    """
    info = session.binary_info()
    sample = Sample(
        name=info.name,
        arch=info.arch,
        bits=info.bits,
        compiler=info.compiler,
        stripped=info.stripped,
        link_static=info.static,
        sect_header=session.section_count() > RICH_SECTION_THRESHOLD,
    )
    logger.info(
        f"{sample.name}: arch={sample.arch} bits={sample.bits} "
        f"stripped={sample.stripped} static={sample.link_static}"
    )
    return sample
