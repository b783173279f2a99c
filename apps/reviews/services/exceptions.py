"""Domain exceptions for reviews app."""


class ReviewsServiceError(Exception):
    """Base exception for all reviews service errors."""
    pass


class ContractorNotFoundError(ReviewsServiceError):
    """Contractor does not exist."""
    pass
