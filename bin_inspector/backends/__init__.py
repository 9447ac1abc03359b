"""
Analysis backends: a capability-style session interface plus radare2 and
rizin implementations, selected through ``dispatcher.get_backend``.
"""

__all__ = [
    "base",
    "records",
    "dispatcher",
    "radare2_backend",
    "rizin_backend",
]
