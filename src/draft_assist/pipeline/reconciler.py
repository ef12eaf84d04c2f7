"""Merge per-sentence corrections and variants into suggestions."""

from __future__ import annotations

from draft_assist.models.suggestion import Suggestion


def reconcile(
    sentences: list[str],
    corrections: list[str],
    variant_sets: list[list[str]],
) -> list[Suggestion]:
    """Build the suggestion list, skipping sentences with nothing new to offer.

    A correction identical to its sentence counts as no correction. Variants
    equal to the sentence or the correction, empty variants and repeats are
    dropped.
    """
    suggestions: list[Suggestion] = []
    for i, sentence in enumerate(sentences):
        correction = corrections[i] if i < len(corrections) else ""
        candidates = variant_sets[i] if i < len(variant_sets) else []

        corrected = correction if correction and correction != sentence else ""

        variants: list[str] = []
        for variant in candidates:
            if not variant or variant in (sentence, correction) or variant in variants:
                continue
            variants.append(variant)

        if corrected or variants:
            suggestions.append(
                Suggestion(sentence=sentence, corrected=corrected, variants=variants)
            )
    return suggestions
