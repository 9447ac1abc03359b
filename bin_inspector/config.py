import os
import yaml
from typing import Dict, Any, List, Optional

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))

# Lazy load configuration
_config: Optional[Dict[str, Any]] = None


def get_config() -> Dict[str, Any]:
    """Lazily load and return the configuration from config.yaml."""
    global _config
    if _config is None:
        config_path = os.path.join(PACKAGE_DIR, "config.yaml")
        with open(config_path) as f:
            _config = yaml.safe_load(f) or {}
    return _config


def backend_name(engine_hint: Optional[str] = None) -> str:
    """Resolve the backend engine: explicit hint, then $BI_BACKEND, then config.yaml."""
    if engine_hint:
        return engine_hint.lower()
    key = os.getenv("BI_BACKEND", "").lower()
    if key:
        return key
    return get_config().get("backend", {}).get("default", "radare2").lower()


def top_functions() -> int:
    return int(get_config().get("analysis", {}).get("top_functions", 25))


def dispatcher_window() -> int:
    return int(get_config().get("analysis", {}).get("dispatcher_window", 5))


def decompilers(engine: str) -> List[str]:
    modes = get_config().get("analysis", {}).get("decompilers", {})
    return list(modes.get(engine, ["pdc", "pdg"]))


def asset_dir() -> str:
    """Directory holding vocab.json, config.json and model.pt."""
    path = os.getenv("BI_ASSET_DIR") or get_config().get("classifier", {}).get("asset_dir", "assets")
    if not os.path.isabs(path):
        path = os.path.join(PACKAGE_DIR, path)
    return path


def classifier_device() -> str:
    return get_config().get("classifier", {}).get("device", "cpu")


def sequence_length() -> int:
    return int(get_config().get("classifier", {}).get("sequence_length", 64))


def logging_settings() -> Dict[str, Any]:
    return get_config().get("logging", {})
