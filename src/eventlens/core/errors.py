"""
EventLens error taxonomy

Validation errors subclass ValueError so controllers can map them to 400s
the same way they handle any other bad input.
"""


class InvalidArgument(ValueError):
    """Raised when a generation or aggregation parameter is out of range"""


class ImportValidationError(ValueError):
    """Raised when an imported dataset has no usable rows"""


class GenerationCancelled(RuntimeError):
    """Raised when a caller cancels event generation between batches"""

    def __init__(self, generated: int, requested: int):
        super().__init__(f"Generation cancelled after {generated}/{requested} events")
        self.generated = generated
        self.requested = requested


class GA4AuthError(PermissionError):
    """Raised when the mocked GA4 source rejects a service account"""
