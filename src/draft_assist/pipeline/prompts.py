"""Channel preambles and request payloads."""

from __future__ import annotations

import json

from draft_assist.pipeline.orchestrator import BatchTask
from draft_assist.utils.json_parser import is_string, is_string_list

CORRECTOR_PREAMBLE = """\
You are a meticulous proofreader for text written in: {languages}.

You receive a JSON array of sentences. Return a JSON array with exactly the
same number of items, in the same order. Item i is sentence i with spelling,
grammar and punctuation errors fixed. If a sentence has no errors, return it
unchanged. Do not rephrase, merge, split, add or drop sentences.

Respond with the JSON array only, for example:
["First corrected sentence.", "Second sentence unchanged."]"""

VARIANT_PREAMBLE = """\
You rewrite sentences in a requested tone.

You receive a JSON object {"tone": "...", "sentences": [...]}. Tone is one of
neutral, friendly, formal, concise or casual. Return a JSON array with exactly
one item per input sentence, in the same order. Each item is an array of up to
{count} alternative phrasings of that sentence in the requested tone. Keep the
meaning. Never repeat the input sentence itself. Use an empty array when no
good rewrite exists.

Respond with the JSON array only, for example:
[["Rewrite one.", "Rewrite two."], []]"""

POLISH_PREAMBLE = """\
You are an editor. You receive a complete draft and a target tone (neutral,
friendly, formal, concise or casual). Rewrite the whole draft in that tone,
fixing grammar and flow while keeping its meaning, facts and paragraph
structure.

Respond with the polished draft only, without commentary or code fences."""


def corrector_preamble(languages: tuple[str, ...] | list[str] = ("en",)) -> str:
    return CORRECTOR_PREAMBLE.replace("{languages}", ", ".join(languages))


def variant_preamble(count: int = 2) -> str:
    return VARIANT_PREAMBLE.replace("{count}", str(count))


def _user(content: str) -> list[dict]:
    return [{"role": "user", "content": content}]


def correction_messages(batch: list[str], extra: object = None) -> list[dict]:
    return _user(json.dumps(batch, ensure_ascii=False))


def variant_messages(batch: list[str], tone: object) -> list[dict]:
    payload = {"tone": str(getattr(tone, "value", tone)), "sentences": batch}
    return _user(json.dumps(payload, ensure_ascii=False))


def polish_messages(draft: str, tone: object) -> list[dict]:
    tone = str(getattr(tone, "value", tone))
    return _user(f"Tone: {tone}\n\nDraft:\n{draft}")


CORRECTION_TASK = BatchTask(
    name="corrector",
    build_messages=correction_messages,
    item_check=is_string,
    fallback_item=str,
)

VARIANT_TASK = BatchTask(
    name="variant_generator",
    build_messages=variant_messages,
    item_check=is_string_list,
    fallback_item=list,
)
