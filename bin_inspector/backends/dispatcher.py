from typing import Dict, Optional

from bin_inspector import config
from .base import BinaryAnalysisBackend
from .radare2_backend import Radare2Backend
from .rizin_backend import RizinBackend

# Backend instances, one per engine
_backend_cache: Dict[str, BinaryAnalysisBackend] = {}

_BACKENDS = {
    "radare2": Radare2Backend,
    "rizin": RizinBackend,
}


def get_backend(engine_hint: Optional[str] = None) -> BinaryAnalysisBackend:
    """
    Return the backend selected by engine_hint, $BI_BACKEND or config.yaml.
    Unknown engines fall back to radare2. Instances are cached per engine.
    """
    key = config.backend_name(engine_hint)
    if key not in _BACKENDS:
        key = "radare2"
    if key not in _backend_cache:
        _backend_cache[key] = _BACKENDS[key]()
    return _backend_cache[key]
