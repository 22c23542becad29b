"""
Serializers for the Ranking app.

The REST layer fetches profiles, behavior and catalog rows from its own
stores and hands them over as plain payloads. These serializers are the
boundary adapter: they validate those payloads, normalize the shapes the
platform produces (instructor as id string or object, instructor name/bio/
expertise keys, course 'content') and build the engine's immutable types.

Provides serialization for:
- Candidate / Catalog: searchable and recommendable items
- SubjectProfile, ProgressRecord, BehaviorSnapshot, SessionContext
- Recommendation and search requests
- ScoredResult / SearchMatch responses
"""

from collections import Counter
from collections.abc import Mapping

from django.utils import timezone
from rest_framework import serializers

from .tracking import (
    MAX_CLICKED_CATEGORIES,
    MAX_PREFERRED_INSTRUCTORS,
    MAX_PREVIOUS_ACTIONS,
    MAX_SEARCH_QUERIES,
)
from .types import (
    BehaviorSnapshot,
    Candidate,
    CandidateKind,
    Catalog,
    LearningPattern,
    ProgressRecord,
    SearchFilters,
    SessionContext,
    SortKey,
    SortOrder,
    SubjectProfile,
)

# Platform payload keys that map onto Candidate fields, per kind
FIELD_ALIASES = {
    CandidateKind.COURSE: {"content": "body"},
    CandidateKind.INSTRUCTOR: {
        "name": "title",
        "title": "description",
        "bio": "body",
        "expertise": "tags",
    },
    CandidateKind.LESSON: {"course_id": "parent_id"},
    CandidateKind.TRANSCRIPT: {"transcript": "body", "lesson_id": "parent_id"},
}


def _apply_aliases(data: Mapping) -> dict:
    kind = data.get("kind", CandidateKind.COURSE)
    aliases = FIELD_ALIASES.get(kind, {})
    # An instructor's 'title' is only a headline when 'name' carries the name
    if kind == CandidateKind.INSTRUCTOR and "name" not in data:
        aliases = {}
    if not any(alias in data for alias in aliases):
        return dict(data)

    remapped = {key: value for key, value in data.items() if key not in aliases}
    for alias, target in aliases.items():
        if alias in data:
            remapped[target] = data[alias]
    return remapped


class InstructorField(serializers.Field):
    """Accepts an instructor as an id string or as an object with id and/or name."""

    default_error_messages = {
        "invalid": "Instructor must be an id string or an object with 'id' or 'name'.",
    }

    def to_internal_value(self, data):
        if isinstance(data, str):
            return {"id": data, "name": data}
        if isinstance(data, Mapping):
            instructor_id = str(data.get("id") or "")
            name = str(data.get("name") or "")
            if instructor_id or name:
                return {"id": instructor_id, "name": name}
        self.fail("invalid")

    def to_representation(self, value):
        return value


class CandidateSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=255)
    kind = serializers.ChoiceField(choices=CandidateKind.choices, default=CandidateKind.COURSE)
    title = serializers.CharField(allow_blank=True)
    description = serializers.CharField(allow_blank=True, required=False, default="")
    body = serializers.CharField(allow_blank=True, required=False, default="")
    tags = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    category = serializers.CharField(allow_blank=True, required=False, default="")
    instructor = InstructorField(required=False)
    parent_id = serializers.CharField(allow_blank=True, required=False, default="")
    rating = serializers.FloatField(min_value=0, required=False, default=0.0)
    popularity = serializers.FloatField(min_value=0, required=False, default=0.0)
    duration = serializers.CharField(allow_blank=True, required=False, default="")
    difficulty = serializers.CharField(allow_blank=True, required=False, default="")
    language = serializers.CharField(allow_blank=True, required=False, default="")
    created_at = serializers.DateTimeField(required=False, allow_null=True, default=None)
    has_transcript = serializers.BooleanField(required=False, default=False)
    has_subtitles = serializers.BooleanField(required=False, default=False)
    is_free = serializers.BooleanField(required=False, default=False)
    is_featured = serializers.BooleanField(required=False, default=False)
    progress_events = serializers.IntegerField(min_value=0, required=False, default=0)
    completion_events = serializers.IntegerField(min_value=0, required=False, default=0)

    def to_internal_value(self, data):
        if isinstance(data, Mapping):
            data = _apply_aliases(data)
        return super().to_internal_value(data)

    def create(self, validated_data):
        data = dict(validated_data)
        instructor = data.pop("instructor", None) or {}
        if data["kind"] == CandidateKind.INSTRUCTOR:
            # An instructor record is its own instructor for filtering
            instructor = {
                "id": instructor.get("id") or data["id"],
                "name": instructor.get("name") or data["title"],
            }
        return Candidate(
            **{**data, "tags": tuple(data.get("tags", ()))},
            instructor_id=instructor.get("id", ""),
            instructor_name=instructor.get("name", ""),
        )


class CatalogSerializer(serializers.Serializer):
    candidates = CandidateSerializer(many=True)
    categories = serializers.ListField(child=serializers.CharField(), required=False, default=list)

    def validate_candidates(self, value):
        counts = Counter(item["id"] for item in value)
        duplicates = sorted(cid for cid, count in counts.items() if count > 1)
        if duplicates:
            raise serializers.ValidationError(f"Duplicate candidate ids: {', '.join(duplicates)}")
        return value

    def create(self, validated_data):
        builder = CandidateSerializer()
        return Catalog(
            candidates=tuple(builder.create(item) for item in validated_data["candidates"]),
            categories=tuple(validated_data.get("categories", ())),
        )


class SubjectProfileSerializer(serializers.Serializer):
    id = serializers.CharField(max_length=255)
    interests = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    education_level = serializers.CharField(allow_blank=True, required=False, default="")
    experience_level = serializers.CharField(allow_blank=True, required=False, default="")
    industry = serializers.CharField(allow_blank=True, required=False, default="")
    country = serializers.CharField(allow_blank=True, required=False, default="")
    city = serializers.CharField(allow_blank=True, required=False, default="")

    def create(self, validated_data):
        return SubjectProfile(
            **{**validated_data, "interests": tuple(validated_data.get("interests", ()))}
        )


class ProgressRecordSerializer(serializers.Serializer):
    candidate_id = serializers.CharField(max_length=255)
    completed = serializers.BooleanField(required=False, default=False)
    progress = serializers.FloatField(min_value=0, max_value=100, required=False, default=0.0)

    def create(self, validated_data):
        return ProgressRecord(**validated_data)


class LearningPatternSerializer(serializers.Serializer):
    preferred_time = serializers.ChoiceField(
        choices=("morning", "afternoon", "evening"), required=False, default="morning"
    )
    session_duration = serializers.FloatField(min_value=0, required=False, default=0.0)
    completion_rate = serializers.FloatField(min_value=0, required=False, default=0.0)

    def create(self, validated_data):
        return LearningPattern(**validated_data)


class BehaviorSnapshotSerializer(serializers.Serializer):
    views = serializers.DictField(child=serializers.IntegerField(min_value=0), required=False, default=dict)
    completions = serializers.DictField(child=serializers.IntegerField(min_value=0), required=False, default=dict)
    time_spent = serializers.DictField(child=serializers.FloatField(min_value=0), required=False, default=dict)
    search_queries = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    clicked_categories = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    preferred_instructors = serializers.ListField(child=serializers.CharField(), required=False, default=list)
    learning_pattern = LearningPatternSerializer(required=False)

    def create(self, validated_data):
        pattern = validated_data.get("learning_pattern")
        return BehaviorSnapshot(
            views=dict(validated_data.get("views", {})),
            completions=dict(validated_data.get("completions", {})),
            time_spent=dict(validated_data.get("time_spent", {})),
            # Same bounds the tracker keeps
            search_queries=tuple(validated_data.get("search_queries", ())[-MAX_SEARCH_QUERIES:]),
            clicked_categories=tuple(validated_data.get("clicked_categories", ())[-MAX_CLICKED_CATEGORIES:]),
            preferred_instructors=tuple(
                validated_data.get("preferred_instructors", ())[-MAX_PREFERRED_INSTRUCTORS:]
            ),
            learning_pattern=LearningPattern(**pattern) if pattern else LearningPattern(),
        )


class SessionContextSerializer(serializers.Serializer):
    current_time = serializers.DateTimeField(required=False)
    session_duration = serializers.FloatField(min_value=0, required=False, default=0.0)
    device_type = serializers.CharField(allow_blank=True, allow_null=True, required=False, default=None)
    location = serializers.CharField(allow_blank=True, allow_null=True, required=False, default=None)
    previous_actions = serializers.ListField(child=serializers.CharField(), required=False, default=list)

    def create(self, validated_data):
        return SessionContext(
            current_time=validated_data.get("current_time") or timezone.now(),
            session_duration=validated_data.get("session_duration", 0.0),
            device_type=validated_data.get("device_type") or None,
            location=validated_data.get("location") or None,
            previous_actions=tuple(validated_data.get("previous_actions", ())[-MAX_PREVIOUS_ACTIONS:]),
        )


class SearchFiltersSerializer(serializers.Serializer):
    category = serializers.CharField(required=False, allow_null=True, default=None)
    instructor = serializers.CharField(required=False, allow_null=True, default=None)
    difficulty = serializers.CharField(required=False, allow_null=True, default=None)
    duration = serializers.CharField(required=False, allow_null=True, default=None)
    min_rating = serializers.FloatField(required=False, allow_null=True, default=None)
    language = serializers.CharField(required=False, allow_null=True, default=None)
    tags = serializers.ListField(child=serializers.CharField(), required=False, allow_null=True, default=None)
    has_transcript = serializers.BooleanField(required=False, allow_null=True, default=None)
    has_subtitles = serializers.BooleanField(required=False, allow_null=True, default=None)
    is_free = serializers.BooleanField(required=False, allow_null=True, default=None)
    is_featured = serializers.BooleanField(required=False, allow_null=True, default=None)

    def create(self, validated_data):
        tags = validated_data.get("tags")
        return SearchFilters(
            **{**validated_data, "tags": tuple(tags) if tags is not None else None}
        )


class RecommendationRequestSerializer(serializers.Serializer):
    profile = SubjectProfileSerializer(required=False, allow_null=True, default=None)
    progress = ProgressRecordSerializer(many=True, required=False, default=list)
    behavior = BehaviorSnapshotSerializer(required=False, allow_null=True, default=None)
    context = SessionContextSerializer(required=False, allow_null=True, default=None)
    limit = serializers.IntegerField(min_value=1, required=False, allow_null=True, default=None)

    def create(self, validated_data):
        profile = validated_data.get("profile")
        behavior = validated_data.get("behavior")
        context = validated_data.get("context")
        return {
            "profile": SubjectProfileSerializer().create(profile) if profile else None,
            "progress": [ProgressRecordSerializer().create(p) for p in validated_data.get("progress", [])],
            "behavior": BehaviorSnapshotSerializer().create(behavior) if behavior is not None else None,
            "context": SessionContextSerializer().create(context) if context is not None else None,
            "limit": validated_data.get("limit"),
        }


class SearchRequestSerializer(serializers.Serializer):
    query = serializers.CharField(allow_blank=True, trim_whitespace=False)
    filters = SearchFiltersSerializer(required=False, allow_null=True, default=None)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, allow_null=True, default=None)
    offset = serializers.IntegerField(min_value=0, required=False, default=0)
    sort_by = serializers.ChoiceField(choices=SortKey.choices, required=False, default=SortKey.RELEVANCE)
    sort_order = serializers.ChoiceField(choices=SortOrder.choices, required=False, default=SortOrder.DESC)

    def create(self, validated_data):
        filters = validated_data.get("filters")
        return {
            **validated_data,
            "filters": SearchFiltersSerializer().create(filters) if filters is not None else None,
        }


# --- Response Serializers ---


class FactorSerializer(serializers.Serializer):
    name = serializers.CharField()
    group = serializers.CharField()
    weight = serializers.FloatField()
    score = serializers.FloatField()
    description = serializers.CharField()


class ScoredResultSerializer(serializers.Serializer):
    id = serializers.CharField(source="candidate.id")
    type = serializers.CharField(source="candidate.kind")
    title = serializers.CharField(source="candidate.title")
    category = serializers.CharField(source="candidate.category")
    score = serializers.SerializerMethodField()
    confidence = serializers.SerializerMethodField()
    label = serializers.CharField()
    factors = FactorSerializer(many=True)

    def get_score(self, obj):
        return round(obj.score, 4)

    def get_confidence(self, obj):
        return round(obj.confidence, 4)


class SearchMatchSerializer(serializers.Serializer):
    id = serializers.CharField(source="candidate.id")
    type = serializers.CharField(source="candidate.kind")
    title = serializers.CharField(source="candidate.title")
    description = serializers.CharField(source="candidate.description")
    relevance = serializers.FloatField()
    highlights = serializers.SerializerMethodField()
    matched_fields = serializers.ListField(child=serializers.CharField())

    def get_highlights(self, obj):
        return [str(highlight) for highlight in obj.highlights]
