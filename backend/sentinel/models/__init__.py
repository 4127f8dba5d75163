# Re-export all models for convenient imports
from sentinel.models.user import User
from sentinel.models.project import Project, TestKind, WizardPhase
from sentinel.models.test_case import TestCase, TestPriority, TestStatus
from sentinel.models.analysis_result import AnalysisResult

__all__ = [
    "User",
    "Project",
    "TestKind",
    "WizardPhase",
    "TestCase",
    "TestPriority",
    "TestStatus",
    "AnalysisResult",
]
