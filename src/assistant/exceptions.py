class ExternalServiceError(Exception):
    """Raised when the text-generation backend fails or returns something unusable."""
