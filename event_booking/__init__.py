"""Top-level package for the event-booking project.

This package exposes the public run() helper so callers can do
`python -m event_booking` or `from event_booking import run; run()` to
verify configuration, connect and create indexes.
"""

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("event-booking")
except _metadata.PackageNotFoundError:  # pragma: no cover – running from source
    __version__ = "0.0.0"

from .workflows.bootstrap import run  # convenience re-export

__all__ = ["run", "__version__"]
