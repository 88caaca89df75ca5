"""Tests for the interactive version picker."""

from __future__ import annotations

import io
import sys
from typing import Iterable

import pytest

from tvm_core.app import TvmApp
from tvm_core.errors import NotInstalledError
from tvm_core.selector import KEY_DOWN, KEY_UP, InteractiveSelector, SelectionState, render
from tvm_core.versions import Version

VERSIONS = (Version(1, 0, 0), Version(1, 1, 0), Version(2, 0, 0))


def _keys(sequence: Iterable[str]):
    keys = iter(sequence)
    return lambda: next(keys)


def test_state_clamps_at_both_ends() -> None:
    state = SelectionState(VERSIONS, 0)
    assert state.up().index == 0
    assert state.down().down().down().down().index == 2
    assert state.down().up().index == 0


def test_single_version_navigation_is_noop() -> None:
    state = SelectionState((Version(1, 0, 0),))
    assert state.up() == state
    assert state.down() == state


def test_initial_selection_prefers_active() -> None:
    assert SelectionState.initial(VERSIONS, Version(1, 1, 0)).index == 1
    assert SelectionState.initial(VERSIONS, None).index == 2
    assert SelectionState.initial(VERSIONS, Version(9, 0, 0)).index == 2


def test_render_marks_selection_and_active() -> None:
    lines = render(SelectionState(VERSIONS, 0), Version(2, 0, 0))
    assert lines[0] == "  > 1.0.0"
    assert lines[2] == "    2.0.0  (active)"


@pytest.mark.skipif(sys.platform == "win32", reason="entry points are shell scripts")
def test_selector_navigates_and_activates_once(
    app: TvmApp, install_fake, monkeypatch: pytest.MonkeyPatch
) -> None:
    for version in VERSIONS:
        install_fake(str(version))
    app.activator.activate(Version(2, 0, 0))
    calls: list[Version] = []
    original = app.activator.activate

    def counting_activate(version: Version):
        calls.append(version)
        return original(version)

    monkeypatch.setattr(app.activator, "activate", counting_activate)
    output = io.StringIO()
    selector = InteractiveSelector(
        app.activator,
        read_key=_keys([KEY_UP, KEY_UP, KEY_UP, KEY_DOWN, "\r"]),
        output=output,
    )

    result = selector.run(app.store.list_installed())

    assert result.version == Version(1, 1, 0)
    assert calls == [Version(1, 1, 0)]
    assert app.activator.resolve_active_version() == Version(1, 1, 0)
    assert "  > 1.1.0" in output.getvalue()


def test_selector_requires_versions(app: TvmApp) -> None:
    selector = InteractiveSelector(app.activator, read_key=_keys([]), output=io.StringIO())
    with pytest.raises(NotInstalledError):
        selector.choose([])
