"""
Feed rendering errors.

Only errors that end a render are modelled here. Malformed schedules,
component configs and failed domain lookups are recovered where they occur.
"""


class TickerFeedError(Exception):
    """Base error for ticker feed rendering."""


class ChannelNotFoundError(TickerFeedError):
    """The requested channel does not exist."""

    def __init__(self, channel_name: str):
        super().__init__(f'Channel "{channel_name}" not found')
        self.channel_name = channel_name
