"""Tests for the interactive update, prune and cache actions."""

import click
import pytest

from depinsight.actions import (
    clear_cache,
    interactive_update,
    parse_selection,
    prune_unused,
)
from depinsight.models.reports import OutdatedEntry, UnusedReport
from depinsight.npm import NpmError


class RecordingRunner:
    """Stands in for NpmRunner; records calls and fails for chosen names."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[tuple] = []

    def install(self, name: str, version: str | None = None) -> str:
        self.calls.append(("install", name, version))
        if name in self.failing:
            raise NpmError(f"npm install {name} failed", stderr="E404")
        return ""

    def uninstall(self, name: str) -> str:
        self.calls.append(("uninstall", name))
        if name in self.failing:
            raise NpmError(f"npm uninstall {name} failed")
        return ""

    def cache_clean(self) -> str:
        self.calls.append(("cache_clean",))
        return ""


def _answers(monkeypatch: pytest.MonkeyPatch, prompts: list[str], confirms: list[bool] = ()) -> None:
    prompt_iter = iter(prompts)
    confirm_iter = iter(confirms)
    monkeypatch.setattr(click, "prompt", lambda *a, **kw: next(prompt_iter))
    monkeypatch.setattr(click, "confirm", lambda *a, **kw: next(confirm_iter))


OUTDATED = [
    OutdatedEntry(name="react", current="17.0.2", wanted="17.0.2", latest="18.2.0"),
    OutdatedEntry(name="lodash", current="4.17.20", wanted="4.17.21", latest="4.17.21"),
    OutdatedEntry(name="chalk", current="4.1.2", wanted="4.1.2", latest="5.3.0"),
]


class TestParseSelection:
    """Tests for parse_selection."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("", []),
            ("none", []),
            ("all", [0, 1, 2, 3]),
            ("ALL", [0, 1, 2, 3]),
            ("2", [1]),
            ("1,3", [0, 2]),
            ("2-4", [1, 2, 3]),
            ("3, 1-2", [2, 0, 1]),
            ("1,1,1-2", [0, 1]),
            ("1,,2", [0, 1]),
        ],
    )
    def test_valid(self, text: str, expected: list[int]):
        assert parse_selection(text, 4) == expected

    @pytest.mark.parametrize("text", ["0", "5", "a", "3-2", "1-9", "-1"])
    def test_invalid(self, text: str):
        with pytest.raises(click.BadParameter):
            parse_selection(text, 4)


class TestInteractiveUpdate:
    """Tests for interactive_update."""

    def test_nothing_outdated(self, capsys: pytest.CaptureFixture[str]):
        runner = RecordingRunner()

        assert interactive_update(runner, []) == 0

        assert "All dependencies are up to date!" in capsys.readouterr().out
        assert runner.calls == []

    def test_installs_selected_latest(self, monkeypatch: pytest.MonkeyPatch, capsys):
        runner = RecordingRunner()
        _answers(monkeypatch, ["1,3"])

        assert interactive_update(runner, OUTDATED) == 2

        assert runner.calls == [("install", "react", "18.2.0"), ("install", "chalk", "5.3.0")]
        assert "Successfully updated 2 package(s)" in capsys.readouterr().out

    def test_empty_selection(self, monkeypatch: pytest.MonkeyPatch, capsys):
        runner = RecordingRunner()
        _answers(monkeypatch, [""])

        assert interactive_update(runner, OUTDATED) == 0

        assert runner.calls == []
        assert "No packages selected for update." in capsys.readouterr().out

    def test_reprompts_on_invalid_selection(self, monkeypatch: pytest.MonkeyPatch):
        runner = RecordingRunner()
        _answers(monkeypatch, ["9", "2"])

        interactive_update(runner, OUTDATED)

        assert runner.calls == [("install", "lodash", "4.17.21")]

    def test_failure_does_not_stop_the_rest(self, monkeypatch: pytest.MonkeyPatch, capsys):
        runner = RecordingRunner(failing={"react"})
        _answers(monkeypatch, ["all"])

        assert interactive_update(runner, OUTDATED) == 2

        assert [c[1] for c in runner.calls] == ["react", "lodash", "chalk"]
        out = capsys.readouterr().out
        assert "Error installing react" in out
        assert "Successfully updated 2 package(s)" in out


class TestPruneUnused:
    """Tests for prune_unused."""

    REPORT = UnusedReport(dependencies=["moment"], dev_dependencies=["eslint"])

    def test_declined(self, monkeypatch: pytest.MonkeyPatch):
        runner = RecordingRunner()
        _answers(monkeypatch, [], [False])

        assert prune_unused(runner, self.REPORT) == 0
        assert runner.calls == []

    def test_uninstalls_selected(self, monkeypatch: pytest.MonkeyPatch, capsys):
        runner = RecordingRunner()
        _answers(monkeypatch, ["all"], [True])

        assert prune_unused(runner, self.REPORT) == 2

        assert runner.calls == [("uninstall", "moment"), ("uninstall", "eslint")]
        assert "Successfully uninstalled 2 package(s)" in capsys.readouterr().out

    def test_nothing_selected(self, monkeypatch: pytest.MonkeyPatch, capsys):
        runner = RecordingRunner()
        _answers(monkeypatch, ["none"], [True])

        assert prune_unused(runner, self.REPORT) == 0
        assert "No packages selected for uninstallation." in capsys.readouterr().out

    def test_empty_report_asks_nothing(self, monkeypatch: pytest.MonkeyPatch):
        _answers(monkeypatch, [], [])

        assert prune_unused(RecordingRunner(), UnusedReport()) == 0


class TestClearCache:
    """Tests for clear_cache."""

    def test_confirmed(self, monkeypatch: pytest.MonkeyPatch, capsys):
        runner = RecordingRunner()
        _answers(monkeypatch, [], [True])

        assert clear_cache(runner) is True

        assert runner.calls == [("cache_clean",)]
        assert "Successfully cleared npm cache" in capsys.readouterr().out

    def test_aborted(self, monkeypatch: pytest.MonkeyPatch, capsys):
        runner = RecordingRunner()
        _answers(monkeypatch, [], [False])

        assert clear_cache(runner) is False

        assert runner.calls == []
        assert "Operation aborted" in capsys.readouterr().out
