"""
Exception types for screenflow.

Parsing never raises; only rendering does.
"""


class ScreenflowError(Exception):
    """Base class for screenflow errors."""

    pass


class RenderError(ScreenflowError):
    """Raised when a diagram builder fails to render a graph."""

    pass


class FontLoadError(RenderError):
    """Raised when a required font cannot be loaded."""

    def __init__(self, font: str, reason: str = ""):
        self.font = font
        message = f"Could not load font '{font}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
