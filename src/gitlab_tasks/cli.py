"""Console-script shim.

The entry point is implemented in `gitlab_tasks.main`.
"""

from __future__ import annotations

from gitlab_tasks.main import main

__all__ = ["main"]


if __name__ == "__main__":
    raise SystemExit(main())
