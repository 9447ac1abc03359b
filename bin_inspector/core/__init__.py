"""
Pipeline stages.

Each stage takes the live backend session and returns its own result; the
pipeline in ``bin_inspector.inspector`` folds the results into the report.
"""

__all__ = [
    "characterize",
    "strategy",
    "scanners",
    "syscalls",
    "tagging",
    "flattening",
    "optimization",
    "report",
]
