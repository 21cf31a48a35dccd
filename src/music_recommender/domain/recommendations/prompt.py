"""Prompt construction for LLM-refined recommendations.

The prompt is bounded: at most ``max_similar_items`` entries per similarity
list and ``max_previous_names`` previously recommended names are embedded,
regardless of how much history the user has accumulated.
"""

from __future__ import annotations

from collections.abc import Sequence

from music_recommender.domain.recommendations.entities import (
    MAX_PROMPT_PREVIOUS_NAMES,
    MAX_PROMPT_SIMILAR_ITEMS,
    FeedbackEntry,
    SimilarItem,
    SourceItemMetadata,
)

SYSTEM_PROMPT = (
    "You are a music recommendation assistant. You answer with a JSON array only, "
    "without commentary."
)

_DIVIDER = "=" * 70

_OUTPUT_FORMAT = """OUTPUT FORMAT: a JSON array of objects with these fields:
- "name": string. Non-artist suggestions MUST be formatted as "Artist - Title" \
(e.g. "Miles Davis - Kind of Blue"). Use the title alone only when no artist is known. \
If the source item is an artist, use the artist name only.
- "reasoning": string, 1-2 sentences stating the concrete musical similarities \
(shared genres, instrumentation, mood).
- "confidence": number between 0.0 and 1.0 reflecting real genre/tag overlap.

GOOD:
{"name": "Bill Evans - Waltz for Debby", "reasoning": "Shares the vocal jazz and jazz pop \
genres with piano-driven arrangements and intimate vocals.", "confidence": 0.85}
{"name": "Chet Baker", "reasoning": "Soft, intimate vocal jazz with sparse \
instrumentation in the cool jazz tradition.", "confidence": 0.82}

BAD:
{"name": "Waltz for Debby", "reasoning": "This album might appeal to listeners.", \
"confidence": 0.85}   <- missing artist, vague and hedging"""

_GUIDELINES = """GUIDELINES:
1. Prefer the similar items listed above, favouring the highest scores and most shared genres.
2. Only when that data is insufficient, suggest well-known items in the same genres ({genres}).
3. Match musical attributes: genre, style, instrumentation, mood. Ignore title look-alikes.
4. Take the user's preference history for THIS source item into account.
5. All {amount} recommendations must be unique and different from the source item.
6. Write reasoning in direct, active statements ("Features X", "Blends Y and Z").

CONSTRAINTS:
- NEVER recommend the source item itself.
- NEVER recommend anything listed under PREVIOUSLY RECOMMENDED or the preference history.
- DO NOT use hedging words such as "likely", "probably", "might", "could", "may", "potentially".
- DO NOT start reasoning with "This album", "This release", "This recommendation" or "This track".
- Base confidence on actual genre/style overlap; do not inflate it.
- ALWAYS format non-artist names as "Artist - Title"."""


def _format_similar_section(
    heading: str,
    items: Sequence[SimilarItem],
    limit: int,
    *,
    quoted: bool,
) -> str | None:
    if not items:
        return None

    lines = [f"- {heading} ({len(items)} total):"]
    for item in items[:limit]:
        label = item.label or "Unknown"
        if quoted:
            label = f'"{label}"' + (f" by {item.artist}" if item.artist else "")
        line = f"  * {label} - Score: {item.score:.2f}"
        if item.shared_genres:
            line += f", Genres: [{', '.join(item.shared_genres)}]"
        lines.append(line)
    return "\n".join(lines)


def _format_feedback(entries: Sequence[FeedbackEntry], positive: bool) -> str:
    lines = [
        f"- Item: {e.item} (Source: {e.source_item}), Reasoning: {e.reasoning}"
        for e in entries
        if e.feedback is positive
    ]
    return "\n".join(lines) or "None yet"


def build_recommendation_prompt(
    *,
    user_id: str,
    amount: int,
    metadata: SourceItemMetadata,
    similar_artists: Sequence[SimilarItem] = (),
    similar_recordings: Sequence[SimilarItem] = (),
    similar_release_groups: Sequence[SimilarItem] = (),
    feedback_history: Sequence[FeedbackEntry] = (),
    previous_names: Sequence[str] = (),
    max_similar_items: int = MAX_PROMPT_SIMILAR_ITEMS,
    max_previous_names: int = MAX_PROMPT_PREVIOUS_NAMES,
) -> str:
    """Render the user prompt asking for exactly *amount* recommendations."""
    genres = ", ".join(metadata.genre_names) or "N/A"
    tags = ", ".join(metadata.tag_names) or "N/A"

    sections = [
        section
        for section in (
            _format_similar_section(
                "Similar Artists", similar_artists, max_similar_items, quoted=False
            ),
            _format_similar_section(
                "Similar Recordings", similar_recordings, max_similar_items, quoted=True
            ),
            _format_similar_section(
                "Similar Albums/Release Groups",
                similar_release_groups,
                max_similar_items,
                quoted=True,
            ),
        )
        if section is not None
    ]
    similar_block = "\n".join(sections) or "- Limited information available from MusicBrainz."

    previous_block = (
        "\n".join(f"- {name}" for name in previous_names[:max_previous_names]) or "None yet"
    )

    source_lines = [
        f"Name: {metadata.display_name or 'Unknown'}",
        f"Type: {metadata.type or 'Unknown'}",
    ]
    if metadata.disambiguation:
        source_lines.append(f"Context: {metadata.disambiguation}")

    parts = [
        "You are a music recommendation assistant. Recommend music similar to a source "
        "item based on MUSICAL CHARACTERISTICS from MusicBrainz data.",
        f"TASK: Generate exactly {amount} unique music recommendations for user {user_id}.",
        _OUTPUT_FORMAT,
        _DIVIDER,
        "SOURCE ITEM BEING ANALYZED:\n" + "\n".join(source_lines),
        f"MUSICAL CHARACTERISTICS:\n* Genres: {genres}\n* User Tags: {tags}",
        "SIMILAR ITEMS FROM MUSICBRAINZ DATABASE:\n" + similar_block,
        "PRIORITIZE RECOMMENDATIONS FROM THE SIMILAR ITEMS ABOVE. They were matched on "
        "genre/tag overlap; suggest other entities only when they are clearly closer "
        "musically.",
        f"USER {user_id}'S PREFERENCE HISTORY FOR THIS SOURCE ITEM:\n"
        f"Previously Liked:\n{_format_feedback(feedback_history, True)}\n"
        f"Previously Disliked:\n{_format_feedback(feedback_history, False)}",
        f"PREVIOUSLY RECOMMENDED (DO NOT REPEAT):\n{previous_block}",
        _DIVIDER,
        _GUIDELINES.format(genres=genres, amount=amount),
    ]
    return "\n\n".join(parts)
