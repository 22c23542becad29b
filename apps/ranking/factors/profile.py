"""Content-based factors: the candidate's text against the subject's profile."""

from ..types import Candidate, Factor, FactorGroup, SubjectProfile
from .base import FactorCalculator, ScoringInputs, contains_any

EDUCATION_WEIGHTS = {
    'high-school': 0.3,
    'associate': 0.5,
    'bachelor': 0.7,
    'master': 0.9,
    'phd': 1.0,
    'professional': 0.8,
    'other': 0.6,
}

EXPERIENCE_WEIGHTS = {
    'entry': 0.3,
    'mid': 0.6,
    'senior': 0.9,
}

INDUSTRY_KEYWORDS = {
    'Technology & Digital Innovation': ['technology', 'digital', 'innovation', 'software', 'tech'],
    'Financial Services & Fintech': ['finance', 'financial', 'fintech', 'banking', 'investment'],
    'Healthcare & Pharmaceuticals': ['healthcare', 'medical', 'pharmaceutical', 'health', 'medicine'],
    'Manufacturing & Industrial': ['manufacturing', 'industrial', 'production', 'factory', 'automation'],
    'Agriculture & Agribusiness': ['agriculture', 'farming', 'agribusiness', 'crop', 'livestock'],
    'Education & Training': ['education', 'training', 'learning', 'teaching', 'academic'],
}

NEUTRAL_LEVEL = 0.5
GEO_CITY_SCORE = 0.9
GEO_COUNTRY_SCORE = 0.8
GEO_BASELINE_SCORE = 0.3


def estimate_difficulty(candidate: Candidate) -> float:
    text = candidate.text
    if contains_any(text, ('advanced', 'expert', 'master')):
        return 0.9
    if 'intermediate' in text:
        return 0.6
    if contains_any(text, ('beginner', 'intro', 'basic')):
        return 0.3
    return 0.5


def education_weight(level: str) -> float:
    return EDUCATION_WEIGHTS.get(level.strip().lower(), NEUTRAL_LEVEL)


def experience_weight(level: str) -> float:
    """Resolves labels like 'Mid-Level (3-7 years)' by their leading word."""
    normalized = level.strip().lower()
    for key, weight in EXPERIENCE_WEIGHTS.items():
        if normalized.startswith(key):
            return weight
    return NEUTRAL_LEVEL


def industry_keywords(industry: str) -> list[str]:
    return INDUSTRY_KEYWORDS.get(industry, [industry.lower()])


class ProfileFactorCalculator(FactorCalculator):
    group = FactorGroup.PROFILE

    def calculate(self, candidate: Candidate, inputs: ScoringInputs) -> list[Factor]:
        profile: SubjectProfile | None = inputs.profile
        if profile is None:
            return []

        factors = []
        text = candidate.text
        difficulty = estimate_difficulty(candidate)

        interests = profile.active_interests
        if interests:
            matched = [i for i in interests if i.lower() in text]
            score = len(matched) / len(interests)
            factors.append(self.make_factor(
                'Interest Match',
                self.weights.interest_match,
                score,
                f"Matches {round(score * 100)}% of your interests",
            ))

        if profile.education_level:
            factors.append(self.make_factor(
                'Education Level',
                self.weights.education_level,
                1 - abs(difficulty - education_weight(profile.education_level)),
                f"Appropriate for your {profile.education_level} background",
            ))

        if profile.experience_level:
            factors.append(self.make_factor(
                'Experience Level',
                self.weights.experience_level,
                1 - abs(difficulty - experience_weight(profile.experience_level)),
                f"Matches your {profile.experience_level} experience",
            ))

        if profile.industry:
            keywords = industry_keywords(profile.industry)
            matched = [k for k in keywords if k.lower() in text]
            factors.append(self.make_factor(
                'Industry Relevance',
                self.weights.industry_match,
                len(matched) / len(keywords),
                f"Relevant to your {profile.industry} industry",
            ))

        if profile.country or profile.city:
            if profile.city and profile.city.lower() in text:
                geo_score = GEO_CITY_SCORE
            elif profile.country and profile.country.lower() in text:
                geo_score = GEO_COUNTRY_SCORE
            else:
                geo_score = GEO_BASELINE_SCORE
            factors.append(self.make_factor(
                'Geographic Relevance',
                self.weights.geographic_relevance,
                geo_score,
                'Relevant to your location',
            ))

        return factors
