"""Utility helpers shared by the manifest loader."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from learn_pages._constants import DEFAULT_STATUS, PATH_KEY_SEPARATOR

from .models import (
    Challenge,
    FreeFormChallenge,
    Lesson,
    MultipleChoiceChallenge,
    ValidationError,
)

MULTIPLE_CHOICE_TYPES = frozenset({"multiple-choice", "multiple_choice", "mc"})
FREEFORM_TYPES = frozenset({"freeform", "free-form", "free_form"})


def _first_present(payload: typ.Mapping[str, typ.Any], *keys: str) -> typ.Any:
    """Return the value of the first key present in ``payload``, else None."""
    for key in keys:
        if key in payload:
            return payload[key]
    return None


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _required_str(
    payload: typ.Mapping[str, typ.Any], key: str, *, where: str
) -> str:
    """Return a non-empty string field or raise ValidationError."""
    text = _optional_str(payload.get(key))
    if text is None:
        msg = f"{where} is missing required field '{key}'."
        raise ValidationError(msg)
    return text


def _as_mapping(value: object, *, where: str) -> typ.Mapping[str, typ.Any]:
    if not isinstance(value, cabc.Mapping):
        msg = f"{where} must be a mapping, got {type(value).__name__}."
        raise ValidationError(msg)
    return typ.cast("typ.Mapping[str, typ.Any]", value)


def _check_slug(slug: str, *, where: str) -> None:
    """Reject slugs that would break the ``section/slug`` path key."""
    if PATH_KEY_SEPARATOR in slug or any(ch.isspace() for ch in slug):
        msg = f"{where} has invalid slug '{slug}'; slugs cannot contain '/' or spaces."
        raise ValidationError(msg)


def _build_challenge(payload: object, *, where: str) -> Challenge:
    """Build a challenge from its manifest mapping."""
    data = _as_mapping(payload, where=where)
    kind = str(_first_present(data, "challengeType", "challenge_type", "type") or "")
    prompt = _optional_str(_first_present(data, "prompt", "question"))
    if prompt is None:
        msg = f"{where} is missing a prompt."
        raise ValidationError(msg)
    match kind.lower():
        case k if k in MULTIPLE_CHOICE_TYPES:
            return _build_multiple_choice(data, prompt, where=where)
        case k if k in FREEFORM_TYPES:
            answer = _first_present(data, "reference_answer", "answer", "solution")
            return FreeFormChallenge(prompt=prompt, reference_answer=_optional_str(answer))
        case _:
            msg = f"{where} has unknown challenge type '{kind}'."
            raise ValidationError(msg)


def _build_multiple_choice(
    data: typ.Mapping[str, typ.Any], prompt: str, *, where: str
) -> MultipleChoiceChallenge:
    raw_options = _first_present(data, "options", "answers") or []
    if not isinstance(raw_options, list | tuple) or not raw_options:
        msg = f"{where} needs a non-empty list of options."
        raise ValidationError(msg)
    options = tuple(str(option) for option in raw_options)

    raw_correct = _first_present(data, "correct", "correctAnswerIndex", "correct_index")
    match raw_correct:
        case bool():
            indices: list[object] = []
        case int():
            indices = [raw_correct]
        case list() | tuple():
            indices = list(raw_correct)
        case _:
            indices = []
    if not indices or not all(
        isinstance(idx, int) and not isinstance(idx, bool) and 0 <= idx < len(options)
        for idx in indices
    ):
        msg = f"{where} must name correct option indices within 0..{len(options) - 1}."
        raise ValidationError(msg)
    return MultipleChoiceChallenge(
        prompt=prompt,
        options=options,
        correct=frozenset(typ.cast("list[int]", indices)),
    )


def _build_lesson(section: str, payload: object, *, position: int) -> Lesson:
    """Build a Lesson for ``section`` from one manifest entry."""
    where = f"Lesson #{position} of section '{section}'"
    data = _as_mapping(payload, where=where)
    slug = _required_str(data, "slug", where=where)
    _check_slug(slug, where=where)
    where = f"Lesson '{section}/{slug}'"
    raw_challenges = data.get("challenges") or []
    if not isinstance(raw_challenges, list | tuple):
        msg = f"{where} must list its challenges as a sequence."
        raise ValidationError(msg)
    challenges = tuple(
        _build_challenge(item, where=f"Challenge #{idx} of {where}")
        for idx, item in enumerate(raw_challenges, start=1)
    )
    return Lesson(
        section=section,
        slug=slug,
        title=_required_str(data, "title", where=where),
        description=_optional_str(data.get("description")) or "",
        video_url=_optional_str(_first_present(data, "video_url", "videoURL")),
        challenges=challenges,
        status=_optional_str(data.get("status")) or DEFAULT_STATUS,
    )


__all__ = [
    "FREEFORM_TYPES",
    "MULTIPLE_CHOICE_TYPES",
    "_as_mapping",
    "_build_challenge",
    "_build_lesson",
    "_check_slug",
    "_optional_str",
    "_required_str",
]
