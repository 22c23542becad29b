"""
Value types shared by the search and personalization halves of the engine.

Everything here is a frozen dataclass. The engine never mutates its inputs and
every call hands back freshly built results, so nothing in this module carries
identity beyond a single invocation.
"""

from dataclasses import dataclass, field
from datetime import datetime

from django.db import models


class CandidateKind(models.TextChoices):
    COURSE = "course", "Course"
    INSTRUCTOR = "instructor", "Instructor"
    LESSON = "lesson", "Lesson"
    TRANSCRIPT = "transcript", "Transcript"


class FactorGroup(models.TextChoices):
    PROFILE = "profile", "Profile-based"
    BEHAVIOR = "behavior", "Behavior-based"
    COLLABORATIVE = "collaborative", "Collaborative"
    CONTEXTUAL = "contextual", "Contextual"


class RecommendationType(models.TextChoices):
    PROFILE_BASED = "profile_based", "Profile-based"
    BEHAVIOR_BASED = "behavior_based", "Behavior-based"
    COLLABORATIVE = "collaborative", "Collaborative"
    CONTEXTUAL = "contextual", "Contextual"
    HYBRID = "hybrid", "Hybrid"


class SortKey(models.TextChoices):
    RELEVANCE = "relevance", "Relevance"
    POPULARITY = "popularity", "Popularity"
    RATING = "rating", "Rating"
    DATE = "date", "Date"
    TITLE = "title", "Title"


class SortOrder(models.TextChoices):
    ASC = "asc", "Ascending"
    DESC = "desc", "Descending"


@dataclass(frozen=True)
class Candidate:
    """
    Immutable snapshot of an item eligible for ranking.

    Instructors map their name to `title`, headline to `description`, bio to
    `body` and expertise to `tags`. Transcripts carry their text in `body` and
    the lesson id in `parent_id`.
    """

    id: str
    kind: str
    title: str
    description: str = ""
    body: str = ""
    tags: tuple[str, ...] = ()
    category: str = ""
    instructor_id: str = ""
    instructor_name: str = ""
    parent_id: str = ""
    rating: float = 0.0
    popularity: float = 0.0
    duration: str = ""  # bucket label, e.g. '6 hours'
    difficulty: str = ""
    language: str = ""
    created_at: datetime | None = None
    has_transcript: bool = False
    has_subtitles: bool = False
    is_free: bool = False
    is_featured: bool = False
    # Engagement across all subjects, supplied by the content store
    progress_events: int = 0
    completion_events: int = 0

    @property
    def text(self) -> str:
        """Lower-cased title and description, the text most factors inspect."""
        return f"{self.title} {self.description}".lower()


@dataclass(frozen=True)
class Catalog:
    """A snapshot of searchable candidates plus the platform's category names."""

    candidates: tuple[Candidate, ...] = ()
    categories: tuple[str, ...] = ()

    def of_kind(self, kind: str) -> list[Candidate]:
        return [c for c in self.candidates if c.kind == kind]


@dataclass(frozen=True)
class SubjectProfile:
    """Profile attributes of the user recommendations are computed for."""

    id: str
    interests: tuple[str, ...] = ()
    education_level: str = ""
    experience_level: str = ""
    industry: str = ""
    country: str = ""
    city: str = ""

    @property
    def active_interests(self) -> tuple[str, ...]:
        return tuple(i for i in self.interests if i and i.strip())

    @property
    def has_profile_data(self) -> bool:
        """Only stated interests count; location and levels alone do not."""
        return bool(self.active_interests)


@dataclass(frozen=True)
class ProgressRecord:
    candidate_id: str
    completed: bool = False
    progress: float = 0.0  # percent, 0-100


@dataclass(frozen=True)
class LearningPattern:
    preferred_time: str = "morning"
    session_duration: float = 0.0
    completion_rate: float = 0.0


@dataclass(frozen=True)
class BehaviorSnapshot:
    """Interaction history of one subject, keyed by candidate id."""

    views: dict = field(default_factory=dict)
    completions: dict = field(default_factory=dict)
    time_spent: dict = field(default_factory=dict)  # seconds
    search_queries: tuple[str, ...] = ()
    clicked_categories: tuple[str, ...] = ()
    preferred_instructors: tuple[str, ...] = ()
    learning_pattern: LearningPattern = field(default_factory=LearningPattern)

    @property
    def is_empty(self) -> bool:
        return not (
            self.views
            or self.completions
            or self.time_spent
            or self.search_queries
            or self.clicked_categories
            or self.preferred_instructors
        )


@dataclass(frozen=True)
class SessionContext:
    current_time: datetime
    session_duration: float = 0.0  # seconds
    device_type: str | None = None
    location: str | None = None
    previous_actions: tuple[str, ...] = ()


@dataclass(frozen=True)
class Factor:
    """One named, weighted and explained sub-score."""

    name: str
    group: str
    weight: float
    score: float
    description: str

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'group': self.group,
            'weight': self.weight,
            'score': round(self.score, 4),
            'description': self.description,
        }


@dataclass(frozen=True)
class ScoredResult:
    """A recommendation for one candidate with its full factor breakdown."""

    candidate: Candidate
    score: float
    confidence: float
    factors: tuple[Factor, ...]
    label: str


@dataclass(frozen=True)
class Highlight:
    label: str
    snippet: str

    def __str__(self) -> str:
        return f"{self.label}: {self.snippet}"


@dataclass(frozen=True)
class SearchMatch:
    """A search hit. Relevance only compares hits of the same query."""

    candidate: Candidate
    relevance: float
    highlights: tuple[Highlight, ...] = ()
    matched_fields: tuple[str, ...] = ()


@dataclass(frozen=True)
class SearchFilters:
    """Structured search constraints. A field left as None matches everything."""

    category: str | None = None
    instructor: str | None = None
    difficulty: str | None = None
    duration: str | None = None
    min_rating: float | None = None
    language: str | None = None
    tags: tuple[str, ...] | None = None
    has_transcript: bool | None = None
    has_subtitles: bool | None = None
    is_free: bool | None = None
    is_featured: bool | None = None
