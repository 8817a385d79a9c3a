class ModelBackendError(RuntimeError):
    """Raised when the model backend fails or returns an unusable answer"""


class ActionError(RuntimeError):
    """Sanitized, user-facing failure of one of the remote operations"""


class TextExtractionError(RuntimeError):
    """Raised when text cannot be extracted from an uploaded document"""


class InvalidDataUriError(ValueError):
    """Raised when a CV data URI is not 'data:<mimetype>;base64,<data>'"""
