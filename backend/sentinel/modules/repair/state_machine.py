"""
Repair session state machine

    IDLE → ANALYZING → ANALYZED ⇄ REPAIRING
             ↑   ↺         │
             └─────────────┘
    any state → IDLE (reset)

A newer analysis may start while one is still running (ANALYZING → ANALYZING);
the superseded run's results are dropped by the orchestrator.
"""

import threading
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Deque, Dict, List, Optional, Set

from sentinel.core.exceptions import InvalidStateTransitionError
from sentinel.core.logging_config import logger


class RepairState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    ANALYZED = "analyzed"
    REPAIRING = "repairing"


REPAIR_TRANSITIONS: Dict[RepairState, Set[RepairState]] = {
    RepairState.IDLE: {RepairState.ANALYZING, RepairState.IDLE},
    RepairState.ANALYZING: {RepairState.ANALYZED, RepairState.ANALYZING, RepairState.IDLE},
    RepairState.ANALYZED: {RepairState.ANALYZING, RepairState.REPAIRING, RepairState.IDLE},
    RepairState.REPAIRING: {RepairState.ANALYZED, RepairState.IDLE},
}


@dataclass(frozen=True)
class Transition:
    source: RepairState
    target: RepairState
    reason: Optional[str] = None
    at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.source.value,
            "to": self.target.value,
            "reason": self.reason,
            "at": self.at.isoformat(),
        }


class RepairStateMachine:
    """
    Validated transitions with a bounded history.

    Invalid transitions raise InvalidStateTransitionError so the HTTP layer
    can report them as 400s.
    """

    def __init__(self, initial_state: RepairState = RepairState.IDLE, max_history: int = 50):
        self._current = initial_state
        self._mutex = threading.Lock()
        self._log: Deque[Transition] = deque(maxlen=max_history)

    @property
    def state(self) -> RepairState:
        return self._current

    def can_transition(self, target: RepairState) -> bool:
        return target in REPAIR_TRANSITIONS[self._current]

    def transition(self, target: RepairState, reason: Optional[str] = None) -> Transition:
        with self._mutex:
            source = self._current
            if target not in REPAIR_TRANSITIONS[source]:
                logger.warning(f"[Repair] Rejected transition {source.value} -> {target.value}")
                raise InvalidStateTransitionError(source.value, target.value)
            record = Transition(source, target, reason)
            self._log.append(record)
            self._current = target

        logger.debug(f"[Repair] {source.value} -> {target.value}" + (f" ({reason})" if reason else ""))
        return record

    def get_history(self, limit: int = 10) -> List[Transition]:
        with self._mutex:
            return list(self._log)[-limit:]
