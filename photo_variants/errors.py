class ImageProcessingError(Exception):
    """Raised when a source image cannot be decoded or a variant cannot be written."""

    def __init__(self, message: str, path: str | None = None):
        self.message = message
        self.path    = path
        super().__init__(message)

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} ({self.path})"
        return self.message
