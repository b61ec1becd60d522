class VisualCodeError(Exception):
    """Raised when a visual-code detector fails on an image."""
