"""DonorBase - donation tracking for events.

Events collect donations whose extra details are described by a per-event
custom field schema, with insights, exports and live snapshot streams.
"""

__version__ = "0.1.0"

from donorbase.infrastructure.api.app import app

__all__ = ["app", "__version__"]
