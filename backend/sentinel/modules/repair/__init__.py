# Code repair workflow

from sentinel.modules.repair.state_machine import RepairState, RepairStateMachine
from sentinel.modules.repair.session import RepairSession, RepairHistoryEntry, OptimizationSummary
from sentinel.modules.repair.orchestrator import RepairOrchestrator
from sentinel.modules.repair.session_store import RepairSessionStore, repair_sessions

__all__ = [
    "RepairState",
    "RepairStateMachine",
    "RepairSession",
    "RepairHistoryEntry",
    "OptimizationSummary",
    "RepairOrchestrator",
    "RepairSessionStore",
    "repair_sessions",
]
