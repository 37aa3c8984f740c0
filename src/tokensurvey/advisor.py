"""CAG vs RAG heuristics.

The decision is a pure function of the total token count against two
thresholds, plus a coarse framework classification that selects extra tips
from fixed tables. All thresholds and tables are module constants; the
thresholds can also be overridden per run through ``AdvisorSettings``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum

from tokensurvey.config import AdvisorSettings, FrameworkMode
from tokensurvey.scan.stats import AggregateStats

CONTEXT_WINDOW_TOKENS = 100_000
HYBRID_MULTIPLIER = 3
EMBEDDING_COST_PER_1K = 0.0001
CHUNK_TOKENS = 1000

JAVASCRIPT_EXTENSIONS: frozenset[str] = frozenset({".js", ".jsx", ".ts", ".tsx"})
RUBY_EXTENSIONS: frozenset[str] = frozenset({".rb", ".erb"})


class FrameworkClass(str, Enum):
    """Coarse framework flavour of a codebase."""

    JAVASCRIPT = "javascript"
    RAILS = "rails"
    BOTH = "both"


class RecommendationTier(str, Enum):
    """Qualitative recommendation bucket.

    Attributes
    ----------
    CAG
        The codebase fits a context window; load it directly.
    HYBRID
        Keep key files in context, retrieve the rest.
    RAG
        Build a retrieval index.
    """

    CAG = "prefer direct context loading"
    HYBRID = "hybrid"
    RAG = "prefer retrieval-based indexing"


TIER_GUIDANCE: dict[RecommendationTier, tuple[str, ...]] = {
    RecommendationTier.CAG: ("Based on token count, CAG would likely be simpler and more effective.",),
    RecommendationTier.HYBRID: (
        "Your codebase is moderate-sized. A hybrid approach might work best:",
        "- Use CAG for the most important files",
        "- Use RAG for the rest of the codebase",
    ),
    RecommendationTier.RAG: (
        "Your codebase is large. RAG would likely be more effective:",
        "- More scalable for large codebases",
        "- Better for targeted queries across many files",
    ),
}

_RAILS_CAG_TIPS = (
    "For Rails, consider loading these critical files in every context:",
    (
        "- config/routes.rb",
        "- db/schema.rb",
        "- app/models/application_record.rb",
        "- app/controllers/application_controller.rb",
    ),
)
_RAILS_HYBRID_TIPS = (
    "For Rails, consider a hybrid approach:",
    (
        "- Keep schema.rb, routes.rb, and application files in CAG",
        "- Use RAG for specific models, controllers, and views",
        "- When retrieving a model, include its related controllers and views",
    ),
)
_RAILS_RAG_TIPS = (
    "For a large Rails codebase:",
    (
        "- Consider chunking by related MVC components",
        "- Always include schema context for model-related queries",
        "- Separate concerns by domain areas if your app is domain-driven",
    ),
)

# (heading, lines) per tier and framework; missing entries mean no tips.
FRAMEWORK_TIPS: dict[RecommendationTier, dict[FrameworkClass, tuple[str, tuple[str, ...]]]] = {
    RecommendationTier.CAG: {FrameworkClass.RAILS: _RAILS_CAG_TIPS, FrameworkClass.BOTH: _RAILS_CAG_TIPS},
    RecommendationTier.HYBRID: {FrameworkClass.RAILS: _RAILS_HYBRID_TIPS, FrameworkClass.BOTH: _RAILS_HYBRID_TIPS},
    RecommendationTier.RAG: {FrameworkClass.RAILS: _RAILS_RAG_TIPS, FrameworkClass.BOTH: _RAILS_RAG_TIPS},
}

RAG_NOTES: tuple[str, ...] = (
    "- Chunk size would need to be optimized for your codebase",
    "- Vector database storage would be needed for embeddings",
)
RAILS_RAG_NOTES: tuple[str, ...] = (
    "- Convention over configuration makes Rails well-suited for RAG",
    "- Consider chunking by model/controller/view relationships",
    "- Rails routes and ActiveRecord relations are critical context to preserve",
)
CAG_FITS_NOTES: tuple[str, ...] = (
    "- Your entire codebase could fit in a single context window",
    "- Direct CAG may be simpler and more effective than RAG",
)
CAG_EXCEEDS_NOTES: tuple[str, ...] = (
    "- Your codebase exceeds typical context windows",
    "- Would require selective context loading or chunking",
    "- Might need a hybrid approach with RAG for larger files",
)
RAILS_CAG_NOTES: tuple[str, ...] = (
    "- Loading related MVC components together can be effective",
    "- Schema.rb is critical context for almost all Rails operations",
    "- Routes.rb provides important application structure context",
)


@dataclass(frozen=True)
class Recommendation:
    """Recommendation tier with its guidance and framework tips."""

    tier: RecommendationTier
    framework: FrameworkClass
    guidance: tuple[str, ...]
    tips_heading: str | None
    tips: tuple[str, ...]


@dataclass(frozen=True)
class Assessment:
    """Everything the report needs from the advisor.

    Attributes
    ----------
    framework
        Framework classification used for tips.
    embedding_cost
        Estimated dollars to embed every token once.
    estimated_chunks
        Number of retrieval chunks at the configured chunk size.
    rag_notes
        Generic RAG considerations.
    rails_rag_notes
        Rails RAG considerations, empty for JavaScript codebases.
    cag_notes
        CAG considerations for the codebase's size.
    rails_cag_notes
        Rails CAG considerations, empty for JavaScript codebases.
    recommendation
        Final recommendation.
    """

    framework: FrameworkClass
    embedding_cost: float
    estimated_chunks: int
    rag_notes: tuple[str, ...]
    rails_rag_notes: tuple[str, ...]
    cag_notes: tuple[str, ...]
    rails_cag_notes: tuple[str, ...]
    recommendation: Recommendation


def classify_framework(stats: AggregateStats, requested: FrameworkMode | str = FrameworkMode.AUTO) -> FrameworkClass:
    """Classify the codebase as JavaScript, Rails, or both.

    An explicit ``requested`` mode is returned unchanged. Under ``auto`` the
    extensions with admitted files decide: only JS/TS present gives
    ``javascript``, only Ruby/ERB gives ``rails``, and both or neither give
    ``both``.
    """
    mode = FrameworkMode(requested)
    if mode is FrameworkMode.JAVASCRIPT:
        return FrameworkClass.JAVASCRIPT
    if mode is FrameworkMode.RAILS:
        return FrameworkClass.RAILS

    present = stats.extensions_present()
    has_js = not present.isdisjoint(JAVASCRIPT_EXTENSIONS)
    has_ruby = not present.isdisjoint(RUBY_EXTENSIONS)
    if has_js and not has_ruby:
        return FrameworkClass.JAVASCRIPT
    if has_ruby and not has_js:
        return FrameworkClass.RAILS
    return FrameworkClass.BOTH


def recommend(
    total_tokens: int,
    framework: FrameworkClass,
    *,
    context_window: int = CONTEXT_WINDOW_TOKENS,
    hybrid_multiplier: int = HYBRID_MULTIPLIER,
) -> Recommendation:
    """Pick a recommendation tier for ``total_tokens``.

    Below ``context_window`` the tier is CAG, below
    ``context_window * hybrid_multiplier`` it is HYBRID, otherwise RAG.
    """
    if total_tokens < context_window:
        tier = RecommendationTier.CAG
    elif total_tokens < context_window * hybrid_multiplier:
        tier = RecommendationTier.HYBRID
    else:
        tier = RecommendationTier.RAG

    heading, tips = FRAMEWORK_TIPS[tier].get(framework, (None, ()))
    return Recommendation(
        tier=tier,
        framework=framework,
        guidance=TIER_GUIDANCE[tier],
        tips_heading=heading,
        tips=tips,
    )


def estimate_embedding_cost(total_tokens: int, price_per_1k: float = EMBEDDING_COST_PER_1K) -> float:
    return total_tokens / 1000 * price_per_1k


def estimate_chunks(total_tokens: int, chunk_tokens: int = CHUNK_TOKENS) -> int:
    return math.ceil(total_tokens / chunk_tokens)


def assess(
    stats: AggregateStats,
    settings: AdvisorSettings | None = None,
    requested: FrameworkMode | str = FrameworkMode.AUTO,
) -> Assessment:
    """Run every heuristic over finalized statistics."""
    settings = settings or AdvisorSettings()
    framework = classify_framework(stats, requested)
    rails = framework in (FrameworkClass.RAILS, FrameworkClass.BOTH)
    fits = stats.total_tokens < settings.context_window_tokens

    return Assessment(
        framework=framework,
        embedding_cost=estimate_embedding_cost(stats.total_tokens, settings.embedding_cost_per_1k),
        estimated_chunks=estimate_chunks(stats.total_tokens, settings.chunk_tokens),
        rag_notes=RAG_NOTES,
        rails_rag_notes=RAILS_RAG_NOTES if rails else (),
        cag_notes=CAG_FITS_NOTES if fits else CAG_EXCEEDS_NOTES,
        rails_cag_notes=RAILS_CAG_NOTES if rails else (),
        recommendation=recommend(
            stats.total_tokens,
            framework,
            context_window=settings.context_window_tokens,
            hybrid_multiplier=settings.hybrid_multiplier,
        ),
    )
