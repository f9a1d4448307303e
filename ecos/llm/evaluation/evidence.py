"""Evidence excerpts drawn from the session transcript."""

from __future__ import annotations

import typing as t

from ecos.model import EvidenceExcerpt, TranscriptMessage

DEFAULT_MAX_EXCERPTS = 3
EXCERPT_LENGTH = 220


def sample_evidence(
    transcript: t.Sequence[TranscriptMessage],
    max_excerpts: int = DEFAULT_MAX_EXCERPTS,
    excerpt_length: int = EXCERPT_LENGTH,
) -> list[EvidenceExcerpt]:
    """Pick a few representative messages from the transcript.

    Short transcripts are returned whole; longer ones are sampled at the
    start, middle and end. The same sample is attached to every criterion.
    """
    excerpt_length = min(excerpt_length, EXCERPT_LENGTH)

    count = len(transcript)
    if count <= max_excerpts:
        indices = list(range(count))
    else:
        # dict.fromkeys keeps order and drops repeats when n is small
        indices = list(dict.fromkeys((0, count // 2, count - 1)))[:max_excerpts]

    return [_excerpt(transcript[i], excerpt_length) for i in indices]


def _excerpt(message: TranscriptMessage, excerpt_length: int) -> EvidenceExcerpt:
    return EvidenceExcerpt(
        role=message.speaker,
        raw_role=message.role,
        excerpt=message.content[:excerpt_length],
        timestamp=message.timestamp,
    )
