"""Read-only value types the rating engine operates on."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Mapping, Optional, Tuple


CRITERIA = ('quality', 'timeliness', 'communication', 'value')


@dataclass(frozen=True)
class CriteriaRatings:
    """
    Optional sub-ratings given alongside the overall rating.

    ``None`` means the reviewer expressed no opinion on that criterion,
    which is different from a low score and is excluded from averages.
    """

    quality: Optional[int] = None
    timeliness: Optional[int] = None
    communication: Optional[int] = None
    value: Optional[int] = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> 'CriteriaRatings':
        """Build from a dict keyed by criterion name or ``<name>_rating``."""
        values = {}
        for name in CRITERIA:
            if name in data:
                values[name] = data[name]
            else:
                values[name] = data.get(f'{name}_rating')
        return cls(**values)

    def present(self) -> Tuple[Tuple[str, int], ...]:
        return tuple(
            (name, getattr(self, name))
            for name in CRITERIA
            if getattr(self, name) is not None
        )


@dataclass(frozen=True)
class ReviewSnapshot:
    """One review row as supplied by the repository."""

    id: Any
    contractor_id: Any
    rating: int
    created_at: datetime
    project_id: Any = None
    reviewer_id: Any = None
    reviewer_name: str = ''
    criteria: CriteriaRatings = field(default_factory=CriteriaRatings)
    comment: Optional[str] = None
    images: Tuple[Any, ...] = ()
    # Compared by identity, so a non-bool value never counts as True/False.
    is_public: Any = True
    is_deleted: Any = False
    helpful_count: int = 0
    response: Optional[str] = None
    responded_at: Optional[datetime] = None


@dataclass(frozen=True)
class ReviewFilters:
    """Optional narrowing applied to a contractor's reviews."""

    rating: Optional[int] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
