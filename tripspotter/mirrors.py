"""Sequential mirror fallback as a small state machine.

States: pending -> trying(0) -> trying(1) ... -> succeeded | failed_all.
``transition`` is pure so it can be driven by any transport, real or fake.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

PENDING = "pending"
TRYING = "trying"
SUCCEEDED = "succeeded"
FAILED_ALL = "failed_all"

START = "start"
ATTEMPT_OK = "attempt_ok"
ATTEMPT_FAILED = "attempt_failed"

TERMINAL_PHASES = {SUCCEEDED, FAILED_ALL}


@dataclass(frozen=True)
class MirrorState:
    phase: str
    mirror_count: int
    index: Optional[int] = None

    @property
    def done(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def current_mirror(self, mirrors: Sequence[str]) -> Optional[str]:
        if self.phase not in (TRYING, SUCCEEDED) or self.index is None:
            return None
        return mirrors[self.index]


def initial_state(mirror_count: int) -> MirrorState:
    if mirror_count < 0:
        raise ValueError("mirror_count must be >= 0")
    return MirrorState(phase=PENDING, mirror_count=mirror_count)


def transition(state: MirrorState, event: str) -> MirrorState:
    if state.phase == PENDING:
        if event != START:
            raise ValueError(f"Invalid event {event!r} in phase {state.phase}")
        if state.mirror_count == 0:
            return MirrorState(phase=FAILED_ALL, mirror_count=0)
        return MirrorState(phase=TRYING, mirror_count=state.mirror_count, index=0)

    if state.phase == TRYING:
        assert state.index is not None
        if event == ATTEMPT_OK:
            return MirrorState(phase=SUCCEEDED, mirror_count=state.mirror_count, index=state.index)
        if event == ATTEMPT_FAILED:
            next_index = state.index + 1
            if next_index >= state.mirror_count:
                return MirrorState(phase=FAILED_ALL, mirror_count=state.mirror_count)
            return MirrorState(phase=TRYING, mirror_count=state.mirror_count, index=next_index)
        raise ValueError(f"Invalid event {event!r} in phase {state.phase}")

    raise ValueError(f"No transitions out of terminal phase {state.phase}")
