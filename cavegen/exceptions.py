class ConfigurationError(ValueError):
    pass


class ResourceExhaustedError(MemoryError):
    """Raised when a grid or the flood fill stack cannot be allocated. A run
    that hits this has no usable partial result."""

    pass


class AtlasSizeError(ValueError):
    def __init__(self, message: str, expected=None, actual=None):
        super().__init__(message)
        self.expected = expected
        self.actual = actual
