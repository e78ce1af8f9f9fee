"""Tests for the individual scorers and score combination."""

import pytest

from marketplace.schemas.recommendation import BotEngagement, UserPreferenceProfile
from marketplace.services.bot_scoring_service import (
    Neighborhood,
    behavioral_score,
    collaborative_score,
    combine_scores,
    content_score,
    recommendation_reason,
    recommendation_tags,
    similarity_score,
    trending_score,
)

from conftest import make_bot


# --- Trending ---

@pytest.mark.parametrize(
    "downloads, rating, expected",
    [
        (1000, 5.0, 1.0),
        (0, 0.0, 0.0),
        (5000, 5.0, 1.0),
        (500, 2.5, 0.5),
        (150, 4.8, 0.474),
    ],
)
def test_trending_score(downloads, rating, expected):
    bot = make_bot("b", download_count=downloads, average_rating=rating)
    assert trending_score(bot) == pytest.approx(expected)


# --- Content ---

def test_content_score_for_matching_bot():
    profile = UserPreferenceProfile(
        category_affinity={"cat1": 2},
        average_price=30,
        preferred_features=["auto-reply"],
    )
    bot = make_bot("b", category_id="cat1", price=29.99, features=["auto-reply", "scheduling"])

    # 0.3 category + 0.2 price + 0.15 half the features + 0.2 same complexity
    assert content_score(profile, bot) == pytest.approx(0.85)


def test_content_category_weight_is_relative_to_strongest_affinity():
    profile = UserPreferenceProfile(category_affinity={"cat1": 2.0, "cat2": 1.0})
    bot = make_bot("b", category_id="cat2", price=500.0, complexity=3)

    # 0.15 category + 0 price + 0 features + 0.2 * (1 - 1/3) complexity
    assert content_score(profile, bot) == pytest.approx(0.15 + 0.2 * 2 / 3)


def test_content_score_handles_empty_profile_and_featureless_bot():
    profile = UserPreferenceProfile()
    bot = make_bot("b", price=25.0, features=[])

    # price range is [25, 100]; complexity matches
    assert content_score(profile, bot) == pytest.approx(0.4)


# --- Behavioral ---

def test_behavioral_score_without_engagement_is_zero():
    assert behavioral_score(UserPreferenceProfile(), make_bot("b")) == 0.0


def test_behavioral_score_adds_capped_terms():
    profile = UserPreferenceProfile(engagement={
        "b": BotEngagement(
            time_spent_ms=150_000,
            interaction_count=5,
            interaction_types=["view", "hover"],
            recent_count=2,
        ),
    })

    # 0.2 time + 0.15 count + 0.2 types + 0.1 recent
    assert behavioral_score(profile, make_bot("b")) == pytest.approx(0.65)


def test_behavioral_score_is_clamped_to_one():
    profile = UserPreferenceProfile(engagement={
        "b": BotEngagement(
            time_spent_ms=600_000,
            interaction_count=40,
            interaction_types=["view", "click", "hover", "scroll"],
            recent_count=40,
        ),
    })

    assert behavioral_score(profile, make_bot("b")) == 1.0


# --- Collaborative ---

@pytest.fixture
def neighborhood():
    return Neighborhood(
        user_purchases={"a", "b"},
        neighbor_purchases={
            "n1": {"a", "c"},
            "n2": {"a", "b", "c", "d"},
            "stranger": {"x"},
        },
        neighbor_ratings={("n1", "c"): 5, ("stranger", "c"): 1},
    )


def test_neighborhood_uses_cosine_similarity_over_purchases(neighborhood):
    assert set(neighborhood.similarities) == {"n1", "n2"}
    assert neighborhood.similarities["n1"] == pytest.approx(0.5)
    assert neighborhood.similarities["n2"] == pytest.approx(2 / 8 ** 0.5)


def test_collaborative_score_weights_neighbor_ratings(neighborhood):
    sim1, sim2 = 0.5, 2 / 8 ** 0.5
    expected = (sim1 * 1.0 + sim2 * 0.8) / (sim1 + sim2)

    assert collaborative_score(neighborhood, make_bot("c")) == pytest.approx(expected)
    assert collaborative_score(neighborhood, make_bot("d")) == pytest.approx(0.8)
    assert collaborative_score(neighborhood, make_bot("unseen")) is None


def test_neighbor_review_without_purchase_counts_as_evidence():
    neighborhood = Neighborhood({"a"}, {"n1": {"a"}}, {("n1", "z"): 3})
    assert collaborative_score(neighborhood, make_bot("z")) == pytest.approx(0.6)


def test_collaborative_score_is_deterministic(neighborhood):
    bot = make_bot("c")
    assert collaborative_score(neighborhood, bot) == collaborative_score(neighborhood, bot)


def test_empty_neighborhood():
    neighborhood = Neighborhood({"a"}, {})
    assert neighborhood.is_empty
    assert collaborative_score(neighborhood, make_bot("c")) is None


# --- Combination ---

def test_combine_scores_uses_fixed_weights():
    components = {"collaborative": 1.0, "content": 0.5, "behavioral": 0.0, "trending": 1.0}
    assert combine_scores(components) == pytest.approx(100 * (0.4 + 0.15 + 0.1))


def test_combine_scores_renormalizes_without_collaborative_evidence():
    components = {"collaborative": 0.0, "content": 0.85, "behavioral": 0.0, "trending": 0.474}
    assert combine_scores(components, use_collaborative=False) == pytest.approx(50.4)


# --- Similarity ---

def test_identical_bots_score_full_marks():
    ref = make_bot("ref", price=20.0, features=["a", "b"], average_rating=4.0)
    twin = make_bot("twin", price=20.0, features=["a", "b"], average_rating=4.0)
    assert similarity_score(ref, twin) == 100.0


def test_feature_overlap_is_bounded():
    features = [f"f{i}" for i in range(12)]
    ref = make_bot("ref", price=10.0, features=features, average_rating=5.0)
    other = make_bot("other", price=10.0, features=features, average_rating=0.0)

    # 30 category + 20 price + 35 features + 0 rating
    assert similarity_score(ref, other) == pytest.approx(85.0)


def test_similarity_price_and_rating_proximity():
    ref = make_bot("ref", price=10.0, average_rating=4.0)
    other = make_bot("other", price=20.0, average_rating=3.0)

    # 30 + (20 - 0.5 * 20) + 0 features + (15 - 3)
    assert similarity_score(ref, other) == pytest.approx(52.0)


def test_similarity_with_free_bots():
    ref = make_bot("ref", price=0.0)
    other = make_bot("other", price=0.0)
    assert similarity_score(ref, other) == pytest.approx(30 + 20 + 15)


# --- Reasons and tags ---

def test_reason_lists_every_matching_clause():
    profile = UserPreferenceProfile(category_affinity={"cat1": 1}, average_price=30, max_price_seen=40)
    bot = make_bot("b", price=15.0, average_rating=4.6, download_count=101)

    assert recommendation_reason(profile, bot) == (
        "Recommended because it matches your interests, fits your price range, "
        "is highly rated and is a popular choice"
    )
    assert recommendation_tags(profile, bot) == [
        "preferred-category", "in-price-range", "highly-rated", "popular", "affordable",
    ]


def test_reason_falls_back_when_nothing_matches():
    profile = UserPreferenceProfile()
    bot = make_bot("b", category_id="other", price=500.0, average_rating=3.0, download_count=5)

    assert recommendation_reason(profile, bot) == "Recommended for you"
    assert recommendation_tags(profile, bot) == []
