"""Report companies with no recent feed activity."""
from __future__ import annotations

from activitymonitor.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
