"""
TickerFeed - Broadcast Ticker Feed Generator

Renders schedule-gated channel content into the tickerfeed XML format
consumed by broadcast graphics playout:
- Channel / playlist / bucket / item hierarchy with per-node schedules
- Live weather, election and school-closing content
- Synthetic bucket items with stable IDs
- Image URL listing for asset pre-caching
"""

__version__ = "1.4.0"
__author__ = "TickerFeed Contributors"
__license__ = "MIT"

from tickerfeed.config import get_config, load_config

__all__ = [
    "__version__",
    "get_config",
    "load_config",
]
