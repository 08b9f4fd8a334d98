from __future__ import annotations

from gitlab_tasks.main import main

raise SystemExit(main())
