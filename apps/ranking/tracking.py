"""
Caller-side collection of behavior signals.

BehaviorTracker accumulates one session's interactions with bounded histories
and hands the engine immutable BehaviorSnapshot / SessionContext values. The
engine itself never sees the tracker.
"""

import re
from collections import Counter, deque
from datetime import datetime

from django.utils import timezone

from .factors.contextual import time_of_day
from .types import BehaviorSnapshot, LearningPattern, SessionContext

MAX_SEARCH_QUERIES = 20
MAX_CLICKED_CATEGORIES = 10
MAX_PREFERRED_INSTRUCTORS = 5
MAX_PREVIOUS_ACTIONS = 10

_TABLET_AGENT = re.compile(r"tablet|ipad")
_MOBILE_AGENT = re.compile(r"mobile|android|iphone|phone")


def detect_device_type(user_agent: str | None) -> str:
    agent = (user_agent or "").lower()
    if _TABLET_AGENT.search(agent):
        return "tablet"
    if _MOBILE_AGENT.search(agent):
        return "mobile"
    return "desktop"


class BehaviorTracker:
    """Accumulates interactions for one subject session."""

    def __init__(self, started_at: datetime | None = None, device_type: str | None = None):
        self.started_at = started_at or timezone.now()
        self.device_type = device_type
        self.views = Counter()
        self.completions = Counter()
        self.time_spent = Counter()
        self.search_queries = deque(maxlen=MAX_SEARCH_QUERIES)
        self.clicked_categories = deque(maxlen=MAX_CLICKED_CATEGORIES)
        self.preferred_instructors = deque(maxlen=MAX_PREFERRED_INSTRUCTORS)
        self.previous_actions = deque(maxlen=MAX_PREVIOUS_ACTIONS)
        self._activity_hours = Counter()

    def _record(self, action: str, at: datetime | None):
        self.previous_actions.append(action)
        self._activity_hours[time_of_day((at or timezone.now()).hour)] += 1

    def track_view(self, candidate_id: str, at: datetime | None = None):
        self.views[candidate_id] += 1
        self._record("course_view", at)

    def track_completion(self, candidate_id: str, at: datetime | None = None):
        self.completions[candidate_id] += 1
        self._record("course_completion", at)

    def track_time_spent(self, candidate_id: str, seconds: float):
        if seconds > 0:
            self.time_spent[candidate_id] += seconds

    def track_search(self, query: str, at: datetime | None = None):
        if query and query.strip():
            self.search_queries.append(query.strip())
            self._record("search", at)

    def track_category_click(self, category: str, at: datetime | None = None):
        self.clicked_categories.append(category)
        self._record("category_click", at)

    def track_instructor(self, instructor_id: str, at: datetime | None = None):
        self.preferred_instructors.append(instructor_id)
        self._record("instructor_click", at)

    def track_page_view(self, page: str, at: datetime | None = None):
        self._record(f"page_{page}", at)

    def session_duration(self, now: datetime | None = None) -> float:
        now = now or timezone.now()
        return max((now - self.started_at).total_seconds(), 0.0)

    def learning_pattern(self, now: datetime | None = None) -> LearningPattern:
        if self._activity_hours:
            # most_common keeps first-seen order on ties
            preferred_time = self._activity_hours.most_common(1)[0][0]
        else:
            preferred_time = time_of_day((now or timezone.now()).hour)

        total_views = sum(self.views.values())
        total_completions = sum(self.completions.values())
        completion_rate = total_completions / total_views if total_views else 0.0

        return LearningPattern(
            preferred_time=preferred_time,
            session_duration=self.session_duration(now),
            completion_rate=completion_rate,
        )

    def snapshot(self, now: datetime | None = None) -> BehaviorSnapshot:
        return BehaviorSnapshot(
            views=dict(self.views),
            completions=dict(self.completions),
            time_spent=dict(self.time_spent),
            search_queries=tuple(self.search_queries),
            clicked_categories=tuple(self.clicked_categories),
            preferred_instructors=tuple(self.preferred_instructors),
            learning_pattern=self.learning_pattern(now),
        )

    def context(self, now: datetime | None = None, location: str | None = None) -> SessionContext:
        now = now or timezone.now()
        return SessionContext(
            current_time=now,
            session_duration=self.session_duration(now),
            device_type=self.device_type,
            location=location,
            previous_actions=tuple(self.previous_actions),
        )
