class VRStudioError(ValueError):
    """Base class for invalid scene input."""


class InvalidInputError(VRStudioError):
    """A value cannot be laid out, eg. an axis with zero range."""


class ShapeMismatchError(VRStudioError):
    """Per-point sequences disagree in length."""

    def __init__(self, field: str, expected: int, actual: int, message=None):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(message or f"'{field}' has length {actual}, expected {expected}")


class EmptyInputError(VRStudioError):
    """No data points were supplied."""


class PaletteSizeError(VRStudioError):
    """The palette function returned fewer colours than there are levels."""

    def __init__(self, requested: int, returned: int):
        self.requested = requested
        self.returned = returned
        super().__init__(
            f"Palette returned {returned} colours for {requested} levels"
        )
