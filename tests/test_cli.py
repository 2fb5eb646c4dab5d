"""Tests for the ``learn`` command line interface.

Commands are called as plain functions against a temporary site tree and
their console output is captured with ``capsys``.
"""

from __future__ import annotations

import json
import typing as typ

import pytest

from learn_pages import cli

if typ.TYPE_CHECKING:
    from pathlib import Path


def _lines(capsys: pytest.CaptureFixture[str]) -> list[str]:
    return capsys.readouterr().out.splitlines()


def test_build_writes_site_and_reports_paths(
    site_tree: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.build(config=site_tree["config"])
    lines = _lines(capsys)
    assert len(lines) == 7
    assert all(line.startswith("wrote ") for line in lines)
    assert lines[0].endswith("index.html")
    assert (tmp_path / "public" / "auth" / "login.html").exists()
    assert not (tmp_path / "public" / "testing" / "fixtures.html").exists()
    assert "Test Academy" in (tmp_path / "public" / "index.html").read_text(
        encoding="utf-8"
    )


def test_build_overrides_output_and_drafts(
    site_tree: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    output = tmp_path / "elsewhere"
    cli.build(config=site_tree["config"], output_dir=output, include_drafts=True)
    assert len(_lines(capsys)) == 8
    assert (output / "testing" / "fixtures.html").exists()
    assert not (tmp_path / "public").exists()


def test_build_with_progress_shows_badges(
    site_tree: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.complete("auth/login", config=site_tree["config"])
    cli.build(config=site_tree["config"], with_progress=True)
    capsys.readouterr()
    html = (tmp_path / "public" / "auth" / "index.html").read_text(encoding="utf-8")
    assert "1/3 lessons complete" in html


def test_build_without_progress_ignores_progress_file(
    site_tree: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.complete("auth/login", config=site_tree["config"])
    cli.build(config=site_tree["config"])
    capsys.readouterr()
    html = (tmp_path / "public" / "auth" / "index.html").read_text(encoding="utf-8")
    assert "0/3 lessons complete" in html


def test_complete_records_progress_once(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    cli.complete("auth/login", config=site_tree["config"])
    cli.complete("auth/login", config=site_tree["config"])
    assert _lines(capsys) == ["completed auth/login", "auth/login already complete"]
    stored = json.loads(site_tree["progress"].read_text(encoding="utf-8"))
    assert stored["lessons"] == ["auth/login"]


def test_complete_challenge(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    cli.complete("auth/login", challenge=0, config=site_tree["config"])
    assert _lines(capsys) == ["completed auth/login challenge #0"]
    stored = json.loads(site_tree["progress"].read_text(encoding="utf-8"))
    assert stored["challenges"] == {"auth/login": [0]}
    assert stored["lessons"] == []


@pytest.mark.parametrize(
    ("path", "challenge", "message"),
    [
        ("auth", None, "not a section/lesson path"),
        ("auth/mfa", None, "Unknown lesson 'mfa'"),
        ("billing/invoices", None, "Unknown section 'billing'"),
        ("auth/logout", 0, "has no challenge #0"),
    ],
)
def test_complete_rejects_bad_targets(
    site_tree: dict[str, Path],
    capsys: pytest.CaptureFixture[str],
    path: str,
    challenge: int | None,
    message: str,
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.complete(path, challenge=challenge, config=site_tree["config"])
    assert excinfo.value.code == 1
    assert message in capsys.readouterr().err
    assert not site_tree["progress"].exists()


def test_progress_file_option_overrides_config(
    site_tree: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    override = tmp_path / "custom.json"
    cli.complete("auth/sso", config=site_tree["config"], progress_file=override)
    capsys.readouterr()
    assert override.exists()
    assert not site_tree["progress"].exists()


def test_status_summarizes_sections(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    cli.complete("auth/login", config=site_tree["config"])
    capsys.readouterr()
    cli.status(config=site_tree["config"])
    assert _lines(capsys) == ["auth: 1/3", "testing: 0/2"]


def test_status_lists_lessons_of_one_section(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    cli.complete("auth/logout", config=site_tree["config"])
    capsys.readouterr()
    cli.status("auth", config=site_tree["config"])
    assert _lines(capsys) == [
        "auth: 1/3",
        "[ ] auth/login",
        "[x] auth/logout",
        "[ ] auth/sso",
    ]


def test_status_unknown_section_fails(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit):
        cli.status("billing", config=site_tree["config"])
    assert "Unknown section 'billing'" in capsys.readouterr().err


def test_next_prints_following_lesson_or_end(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    cli.next_lesson("auth", "login", config=site_tree["config"])
    cli.next_lesson("auth", "sso", config=site_tree["config"])
    assert _lines(capsys) == ["auth/logout", "end of section auth"]


def test_next_unknown_lesson_fails(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.next_lesson("auth", "mfa", config=site_tree["config"])
    assert excinfo.value.code == 1
    assert "Unknown lesson 'mfa'" in capsys.readouterr().err


def test_reset_clears_progress(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    cli.complete("auth/login", config=site_tree["config"])
    cli.reset(config=site_tree["config"])
    cli.status(config=site_tree["config"])
    assert _lines(capsys) == [
        "completed auth/login",
        "progress reset",
        "auth: 0/3",
        "testing: 0/2",
    ]
    stored = json.loads(site_tree["progress"].read_text(encoding="utf-8"))
    assert stored["lessons"] == []


def test_environment_names_default_progress_file(
    site_tree: dict[str, Path],
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    config = tmp_path / "config" / "bare.yaml"
    config.write_text(
        "defaults:\n  manifest: ../content/lessons.yaml\n  content_dir: ../content\n",
        encoding="utf-8",
    )
    target = tmp_path / "env-progress.json"
    monkeypatch.setenv("LEARN_PROGRESS_FILE", str(target))
    cli.complete("testing/first-test", config=config)
    capsys.readouterr()
    assert json.loads(target.read_text(encoding="utf-8"))["lessons"] == [
        "testing/first-test"
    ]


def _corrupt_progress(site_tree: dict[str, Path]) -> None:
    site_tree["progress"].parent.mkdir(parents=True, exist_ok=True)
    site_tree["progress"].write_text("{not json", encoding="utf-8")


@pytest.mark.parametrize(
    "command",
    [
        lambda config: cli.complete("auth/login", config=config),
        lambda config: cli.status(config=config),
        lambda config: cli.status("auth", config=config),
        lambda config: cli.reset(config=config),
    ],
    ids=["complete", "status", "status-section", "reset"],
)
def test_unreadable_progress_file_exits_cleanly(
    site_tree: dict[str, Path],
    capsys: pytest.CaptureFixture[str],
    command: typ.Callable[[Path], None],
) -> None:
    _corrupt_progress(site_tree)
    with pytest.raises(SystemExit) as excinfo:
        command(site_tree["config"])
    assert excinfo.value.code == 1
    assert "Unable to read progress" in capsys.readouterr().err
    assert site_tree["progress"].read_text(encoding="utf-8") == "{not json"


def test_unwritable_progress_file_exits_cleanly(
    site_tree: dict[str, Path], tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    blocker = tmp_path / "state"
    blocker.write_text("not a directory", encoding="utf-8")
    with pytest.raises(SystemExit) as excinfo:
        cli.complete("auth/login", config=site_tree["config"])
    assert excinfo.value.code == 1
    assert "Unable to save progress" in capsys.readouterr().err


def test_next_does_not_read_progress_file(
    site_tree: dict[str, Path], capsys: pytest.CaptureFixture[str]
) -> None:
    _corrupt_progress(site_tree)
    cli.next_lesson("auth", "login", config=site_tree["config"])
    assert _lines(capsys) == ["auth/logout"]
