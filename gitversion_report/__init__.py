"""gitversion-report: print an application's semantic version.

The version comes from an explicit descriptor, from config, or from the
nearest `MAJOR.MINOR.PATCH` git tag.
"""

from __future__ import annotations

__version__ = "0.1.0"

__all__ = [
    "__version__",
]
