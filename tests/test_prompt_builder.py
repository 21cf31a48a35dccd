"""Tests for the recommendation prompt."""

from music_recommender.domain.recommendations.entities import (
    FeedbackEntry,
    MusicBrainzTag,
    SimilarItem,
    SourceItemMetadata,
)
from music_recommender.domain.recommendations.prompt import build_recommendation_prompt

METADATA = SourceItemMetadata(
    name="Radiohead",
    type="Group",
    disambiguation="English rock band",
    genres=[MusicBrainzTag(name="alternative rock"), MusicBrainzTag(name="art rock")],
    tags=[MusicBrainzTag(name="british")],
)


def _build(**kwargs):
    params = {"user_id": "u1", "amount": 3, "metadata": METADATA}
    params.update(kwargs)
    return build_recommendation_prompt(**params)


def test_prompt_states_amount_and_source():
    prompt = _build()
    assert "exactly 3" in prompt
    assert "Name: Radiohead" in prompt
    assert "Type: Group" in prompt
    assert "Context: English rock band" in prompt
    assert "Genres: alternative rock, art rock" in prompt
    assert "User Tags: british" in prompt


def test_prompt_lists_similar_items_with_scores_and_genres():
    prompt = _build(
        similar_artists=[SimilarItem(name="Muse", score=85, shared_genres=["alternative rock"])],
        similar_recordings=[SimilarItem(title="Plug In Baby", artist="Muse", score=60)],
    )
    assert "Muse - Score: 85.00, Genres: [alternative rock]" in prompt
    assert '"Plug In Baby" by Muse - Score: 60.00' in prompt
    assert "Similar Albums/Release Groups" not in prompt


def test_prompt_without_similar_items_says_so():
    assert "Limited information available" in _build()


def test_prompt_bounds_similar_items():
    artists = [SimilarItem(name=f"Artist {n}", score=100 - n) for n in range(15)]
    prompt = _build(similar_artists=artists, max_similar_items=10)
    assert "Similar Artists (15 total)" in prompt
    assert "Artist 9 -" in prompt
    assert "Artist 10 -" not in prompt


def test_prompt_bounds_previous_names():
    names = [f"name {n}" for n in range(60)]
    prompt = _build(previous_names=names, max_previous_names=50)
    assert "- name 49" in prompt
    assert "- name 50" not in prompt


def test_prompt_splits_feedback_history():
    history = [
        FeedbackEntry(
            recommendation_id="r1", item="Muse", feedback=True, reasoning="yes", source_item="s"
        ),
        FeedbackEntry(
            recommendation_id="r2", item="Coldplay", feedback=False, reasoning="no", source_item="s"
        ),
    ]
    prompt = _build(feedback_history=history)
    liked, disliked = prompt.split("Previously Disliked:")
    assert "Item: Muse" in liked.split("Previously Liked:")[1]
    assert "Item: Coldplay" in disliked.split("PREVIOUSLY RECOMMENDED")[0]


def test_prompt_without_history_says_none_yet():
    prompt = _build()
    assert prompt.count("None yet") == 3


def test_prompt_forbids_hedging():
    prompt = _build()
    assert '"Artist - Title"' in prompt
    assert "likely" in prompt
