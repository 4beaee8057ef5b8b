from __future__ import annotations

from typing import List, Optional

from docedit.model import Run, StyleState


class RunBuilder:
    """Accumulate (text, style) fragments into runs, merging equal neighbours.

    Two fragments merge only when their StyleStates are structurally equal;
    any style transition flushes the pending run. Empty fragments are skipped
    so that empty nodes never split a run.
    """

    def __init__(self) -> None:
        self._runs: List[Run] = []
        self._pending_parts: List[str] = []
        self._pending_style: Optional[StyleState] = None

    def add(self, text: str, style: StyleState) -> None:
        if not text:
            return
        if self._pending_style is not None and style == self._pending_style:
            self._pending_parts.append(text)
            return
        self._flush()
        self._pending_style = style
        self._pending_parts = [text]

    def _flush(self) -> None:
        if self._pending_style is not None and self._pending_parts:
            self._runs.append(Run(text="".join(self._pending_parts), style=self._pending_style))
        self._pending_style = None
        self._pending_parts = []

    def finish(self) -> List[Run]:
        """Flush the pending run, return every run so far and reset."""
        self._flush()
        runs = self._runs
        self._runs = []
        return runs
