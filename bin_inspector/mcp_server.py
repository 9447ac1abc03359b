"""
MCP server exposing the inspection pipeline as tools over stdio.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from fastmcp import FastMCP

from bin_inspector import config
from bin_inspector.core.strategy import select_strategy as select_strategy_impl
from bin_inspector.errors import InspectionError

logger = logging.getLogger(__name__)

# Initialize the FastMCP server
mcp = FastMCP(
    "bin_inspector",
    "Static triage of executables: anti-debugging idioms, control-flow flattening and optimization level.",
)

_classifier = None


def _get_classifier():
    """Load the classifier once per server process."""
    global _classifier
    if _classifier is None:
        from bin_inspector.ml.classifier import LstmOptimizationClassifier
        _classifier = LstmOptimizationClassifier.from_assets()
    return _classifier


@mcp.tool()
async def inspect_binary(binary_path: str, backend: Optional[str] = None) -> Dict[str, Any]:
    """
    Inspect a binary and return its report.

    Args:
        binary_path: The absolute path to the binary file.
        backend: "radare2" or "rizin"; defaults to the server configuration.

    Returns:
        {"result": <report>, "error": None} on success, {"result": None, "error": <message>} otherwise.

    Example:
    >>> inspect_binary("/path/to/binary")
    {
        "result": {
            "name": "/path/to/binary",
            "arch": "x86",
            "bits": 64,
            "compiler": "GCC: (Debian 12.2.0-14) 12.2.0",
            "stripped": false,
            "link_static": false,
            "sect_header": true,
            "functions": ["sym.imp.ptrace"],
            "optimized": 40,
            "params": ["PTRACE_TRACEME"],
            "cff": []
        },
        "error": null
    }
    """
    from bin_inspector.inspector import inspect

    # Both calls block; run them in worker threads so the stdio loop stays responsive.
    loop = asyncio.get_running_loop()
    try:
        classifier = await loop.run_in_executor(None, _get_classifier)
        sample = await loop.run_in_executor(None, inspect, binary_path, classifier, backend)
    except InspectionError as e:
        logger.error(f"Inspection of {binary_path} failed: {e}")
        return {"result": None, "error": str(e)}
    return {"result": sample.model_dump(mode="json"), "error": None}


@mcp.tool()
async def select_strategy(link_static: bool, stripped: bool) -> str:
    """
    Which scan the pipeline uses for a binary with these characteristics.

    Returns:
        "import", "link" or "syscall".
    """
    return select_strategy_impl(link_static, stripped).value


if __name__ == "__main__":
    settings = config.logging_settings()
    logging.basicConfig(level=settings.get("level", "INFO"), format=settings.get("format"))
    # Run the server using stdio transport
    mcp.run(transport="stdio")
