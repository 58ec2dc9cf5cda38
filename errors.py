"""Exceptions raised while handling a wheel zoom gesture.

None of these are shown to the user.  :class:`image_zoom.ImageZoomController`
catches them at the event boundary, logs them and leaves the document as it
was.
"""


class ZoomError(Exception):
    """Base class for failures that abort a single zoom operation."""


class DecodeError(ZoomError):
    """The image URI does not hold a decodable base64 PNG header."""


class TargetNotFoundError(ZoomError):
    """No open document contains the hovered image."""


class RewriteMismatchError(ZoomError):
    """The exact prior embed text is not present in the document."""
