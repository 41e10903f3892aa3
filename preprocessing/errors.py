"""Errors raised by the preprocessing stages."""


class InvalidImageError(ValueError):
    """The image is empty, has the wrong shape, or cannot be decoded."""


class EmptyForegroundError(ValueError):
    """No pixel is darker than the image mean, so there is nothing to center."""
