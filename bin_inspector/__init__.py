"""
Static triage of executables: anti-debugging instrumentation, control-flow
flattening and an estimate of the compiler optimization level.
"""
from .core.report import Sample
from .core.strategy import Strategy, select_strategy
from .errors import InspectionError

__version__ = "0.1.0"

__all__ = [
    "Sample",
    "Strategy",
    "select_strategy",
    "InspectionError",
    "__version__",
]
