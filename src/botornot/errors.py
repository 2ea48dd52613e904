"""Exceptions raised inside botornot.

Only ``FetchError`` is meant to reach callers of the byte source helpers;
the others are raised and recovered inside the pipeline.
"""


class BotOrNotError(Exception):
    """Base class for all botornot errors."""

    pass


class MalformedContainer(BotOrNotError):
    """A container structure is inconsistent (overrun, bad offset, bad size).

    Parsers raise this to stop traversal of the current structure. The
    dispatcher turns it into a warning on the parse result.
    """

    pass


class PixelSourceError(BotOrNotError):
    """A pixel surface could not be obtained."""

    pass


class PixelAccessDenied(PixelSourceError):
    """Pixel reads were refused (the cross-origin case in a browser)."""

    pass


class PixelDecodeError(PixelSourceError):
    """The media could not be decoded into pixels."""

    pass


class FetchError(BotOrNotError):
    """Media bytes could not be obtained.

    Attributes:
        reason: Human-readable reason
        blocked: True when the source refused access (401/403/451),
            False for every other failure (network, timeout, 5xx)
    """

    def __init__(self, reason: str, blocked: bool = False) -> None:
        super().__init__(reason)
        self.reason = reason
        self.blocked = blocked
