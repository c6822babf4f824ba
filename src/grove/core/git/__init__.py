"""Git worktree driver subpackage.

Provides the Git interface used by the lifecycle orchestrator and safety
checker, with a subprocess-backed implementation and an in-memory fake.
"""

from grove.core.git.abc import Git
from grove.core.git.real import RealGit

__all__ = [
    "Git",
    "RealGit",
]
