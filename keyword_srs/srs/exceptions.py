class KeywordSRSError(Exception):
    """Base exception for the keyword SRS engine."""
    pass

class InvalidRatingError(KeywordSRSError):
    """Raised when an SM-2 quality rating is outside 1-5."""
    pass

class KeywordCollectionError(KeywordSRSError):
    """Raised when a serialized keyword collection cannot be parsed."""
    pass
