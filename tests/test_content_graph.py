"""Unit tests for building and querying the content graph."""

from __future__ import annotations

import typing as typ

import pytest

from learn_pages.content import (
    ContentGraph,
    Lesson,
    NotFoundError,
    Section,
    ValidationError,
    load_content_graph,
)


def _section(slug: str, *lessons: str) -> dict[str, typ.Any]:
    return {
        slug: {
            "title": slug.title(),
            "lessons": [{"slug": lesson, "title": lesson.title()} for lesson in lessons],
        }
    }


def test_sections_keep_manifest_order(graph: ContentGraph) -> None:
    assert graph.section_slugs() == ("auth", "testing")


def test_lessons_keep_authoring_order(graph: ContentGraph) -> None:
    slugs = [lesson.slug for lesson in graph.lessons_of("auth")]
    assert slugs == ["login", "logout", "sso"]


def test_all_lesson_paths_counts_every_lesson_once(graph: ContentGraph) -> None:
    paths = list(graph.all_lesson_paths())
    assert paths == [
        ("auth", "login"),
        ("auth", "logout"),
        ("auth", "sso"),
        ("testing", "first-test"),
        ("testing", "fixtures"),
    ]
    assert len(set(paths)) == len(paths) == len(graph)


def test_all_lesson_paths_is_restartable(graph: ContentGraph) -> None:
    view = graph.all_lesson_paths()
    first = list(view)
    second = list(view)
    assert first == second
    assert len(view) == 5


@pytest.mark.parametrize(
    ("lesson", "expected"),
    [("login", "logout"), ("logout", "sso"), ("sso", None)],
)
def test_next_lesson_stops_at_section_end(
    graph: ContentGraph, lesson: str, expected: str | None
) -> None:
    following = graph.next_lesson("auth", lesson)
    assert (following.slug if following else None) == expected


def test_next_lesson_does_not_cross_sections(graph: ContentGraph) -> None:
    assert graph.next_lesson("auth", "sso") is None
    assert graph.next_lesson("testing", "first-test").slug == "fixtures"


def test_previous_lesson(graph: ContentGraph) -> None:
    assert graph.previous_lesson("auth", "login") is None
    assert graph.previous_lesson("auth", "sso").slug == "logout"


def test_lesson_by_path_and_key(graph: ContentGraph) -> None:
    lesson = graph.lesson_by_path("auth", "logout")
    assert lesson.title == "Logging out"
    assert lesson.path == "auth/logout"
    assert graph.lesson_by_key("auth/logout") is lesson
    assert ("auth", "logout") in graph
    assert ("auth", "missing") not in graph


def test_lesson_paths_of_section(graph: ContentGraph) -> None:
    assert graph.lesson_paths("testing") == ("testing/first-test", "testing/fixtures")


def test_unknown_section_raises_not_found(graph: ContentGraph) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        graph.lessons_of("billing")
    assert excinfo.value.section == "billing"
    assert excinfo.value.lesson is None


def test_unknown_lesson_raises_not_found(graph: ContentGraph) -> None:
    with pytest.raises(NotFoundError) as excinfo:
        graph.lesson_by_path("auth", "mfa")
    assert excinfo.value.lesson == "mfa"
    with pytest.raises(NotFoundError):
        graph.next_lesson("auth", "mfa")
    with pytest.raises(NotFoundError):
        graph.lesson_by_key("auth")


def test_not_found_is_a_lookup_error(graph: ContentGraph) -> None:
    with pytest.raises(LookupError):
        graph.section("nope")


def test_duplicate_lesson_slug_is_rejected() -> None:
    with pytest.raises(ValidationError, match="more than once"):
        load_content_graph(_section("auth", "login", "logout", "login"))


def test_same_lesson_slug_in_different_sections_is_allowed() -> None:
    graph = load_content_graph({**_section("a", "intro"), **_section("b", "intro")})
    assert list(graph.all_lesson_paths()) == [("a", "intro"), ("b", "intro")]


def test_empty_section_is_rejected() -> None:
    with pytest.raises(ValidationError, match="no lessons"):
        load_content_graph({**_section("auth", "login"), "empty": {"title": "Empty"}})


def test_graph_constructor_validates_sections() -> None:
    lesson = Lesson(section="a", slug="one", title="One")
    with pytest.raises(ValidationError, match="declared more than once"):
        ContentGraph([Section("a", "A", (lesson,)), Section("a", "A", (lesson,))])
    with pytest.raises(ValidationError, match="belongs to"):
        ContentGraph([Section("b", "B", (lesson,))])


def test_graph_is_shared_read_only(graph: ContentGraph) -> None:
    lesson = graph.lesson_by_path("auth", "login")
    with pytest.raises(AttributeError):
        lesson.title = "Changed"  # type: ignore[misc]
    assert isinstance(graph.lessons_of("auth"), tuple)
