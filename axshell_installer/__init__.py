"""Ax-Shell installer (Python-first, idempotent).

Core design goals:
- Idempotent steps: check current state, act only when it differs
- Best-effort: a failed step is logged and the run continues
- Fatal only for preconditions (root, no package manager)
- Manifest-driven package, tool, font and service lists
- Centralized logging
"""

__all__ = []
