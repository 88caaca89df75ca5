"""Interactive picker over the installed versions."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, TextIO

from .activator import Activator, ActivationResult
from .errors import NotInstalledError
from .versions import Version

KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
CTRL_C = "\x03"

_HIDE_CURSOR = "\x1b[?25l"
_SHOW_CURSOR = "\x1b[?25h"
_CLEAR_LINE = "\x1b[2K"


@dataclass(frozen=True)
class SelectionState:
    """Cursor position over an immutable, ordered version list."""

    versions: tuple[Version, ...]
    index: int = 0

    def __post_init__(self) -> None:
        if not self.versions:
            raise ValueError("selection requires at least one version")
        if not 0 <= self.index < len(self.versions):
            raise IndexError(f"selection index {self.index} out of range")

    @classmethod
    def initial(cls, versions: Sequence[Version], active: Optional[Version]) -> "SelectionState":
        ordered = tuple(versions)
        index = ordered.index(active) if active in ordered else len(ordered) - 1
        return cls(ordered, index)

    @property
    def selected(self) -> Version:
        return self.versions[self.index]

    def up(self) -> "SelectionState":
        return SelectionState(self.versions, max(self.index - 1, 0))

    def down(self) -> "SelectionState":
        return SelectionState(self.versions, min(self.index + 1, len(self.versions) - 1))


class RawKeyReader:
    """Read one keypress from the terminal in raw mode, arrow keys included."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdin

    def __call__(self) -> str:
        import termios
        import tty

        fd = self.stream.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)
            key = self.stream.read(1)
            if key == "\x1b":
                key += self.stream.read(2)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
        if key == CTRL_C:
            raise KeyboardInterrupt
        return key


def render(state: SelectionState, active: Optional[Version]) -> list[str]:
    lines = []
    for position, version in enumerate(state.versions):
        marker = ">" if position == state.index else " "
        suffix = "  (active)" if version == active else ""
        lines.append(f"  {marker} {version}{suffix}")
    return lines


class InteractiveSelector:
    """Blocking select loop: up/down move the cursor, any other key confirms."""

    def __init__(
        self,
        activator: Activator,
        *,
        read_key: Callable[[], str] | None = None,
        output: TextIO | None = None,
    ) -> None:
        self.activator = activator
        self.read_key = read_key or RawKeyReader()
        self.output = output or sys.stdout

    def choose(self, versions: Sequence[Version]) -> Version:
        if not versions:
            raise NotInstalledError("no versions installed")
        active = self.activator.resolve_active_version()
        state = SelectionState.initial(versions, active)
        self.output.write(_HIDE_CURSOR)
        try:
            self._draw(state, active, redraw=False)
            while True:
                key = self.read_key()
                if key == KEY_UP:
                    state = state.up()
                elif key == KEY_DOWN:
                    state = state.down()
                else:
                    return state.selected
                self._draw(state, active, redraw=True)
        finally:
            self.output.write(_SHOW_CURSOR)
            self.output.flush()

    def run(self, versions: Sequence[Version]) -> ActivationResult:
        return self.activator.activate(self.choose(versions))

    def _draw(self, state: SelectionState, active: Optional[Version], *, redraw: bool) -> None:
        if redraw:
            self.output.write(f"\x1b[{len(state.versions)}A")
        for line in render(state, active):
            self.output.write(f"{_CLEAR_LINE}{line}\n")
        self.output.flush()
