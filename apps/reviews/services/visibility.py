"""
Visibility rules for contractor reviews.

Two audiences exist:

- the public, who only see reviews that are published and not deleted
- the reviewed contractor, who also sees reviews hidden by moderation

Soft-deleted reviews are invisible to everyone. The flags are compared
by identity with ``True``/``False`` so that values such as ``1``, ``''``
or ``None`` coming from a loosely typed source never make a review
visible by accident.
"""

from typing import Iterable, List

from .types import ReviewSnapshot


def is_publicly_visible(review: ReviewSnapshot) -> bool:
    return review.is_public is True and review.is_deleted is False


def is_visible_to_owner(review: ReviewSnapshot) -> bool:
    return review.is_deleted is False


def public_view(reviews: Iterable[ReviewSnapshot]) -> List[ReviewSnapshot]:
    """Reviews anyone may see, in input order."""
    return [review for review in reviews if is_publicly_visible(review)]


def owner_view(reviews: Iterable[ReviewSnapshot]) -> List[ReviewSnapshot]:
    """Reviews the contractor may see, hidden ones included, in input order."""
    return [review for review in reviews if is_visible_to_owner(review)]


def hidden_reviews(reviews: Iterable[ReviewSnapshot]) -> List[ReviewSnapshot]:
    """Reviews only the contractor sees: what ``owner_view`` adds to ``public_view``."""
    return [
        review for review in reviews
        if is_visible_to_owner(review) and not is_publicly_visible(review)
    ]
