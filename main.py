from __future__ import annotations

from gitversion_report.runtime.lifecycle import main


if __name__ == "__main__":
    raise SystemExit(main())
