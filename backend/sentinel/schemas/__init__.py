# Pydantic schemas
from sentinel.schemas.auth import UserRegister, UserLogin, Token, UserResponse
from sentinel.schemas.project import (
    ProjectParameters,
    ProjectCreate,
    ProjectUpdate,
    PhaseUpdate,
    ProjectResponse,
    ProjectListResponse,
)
from sentinel.schemas.test_case import TestCaseCreate, TestCaseUpdate, TestCaseResponse
from sentinel.schemas.analysis import (
    AnalysisResultResponse,
    GenerateTestCasesRequest,
    AnalyzeTestsRequest,
)
from sentinel.schemas.repair import (
    RepairSessionCreate,
    CodeUpdate,
    CodeAnalysisRequest,
    FixResponse,
    RepairSessionResponse,
)

__all__ = [
    "UserRegister",
    "UserLogin",
    "Token",
    "UserResponse",
    "ProjectParameters",
    "ProjectCreate",
    "ProjectUpdate",
    "PhaseUpdate",
    "ProjectResponse",
    "ProjectListResponse",
    "TestCaseCreate",
    "TestCaseUpdate",
    "TestCaseResponse",
    "AnalysisResultResponse",
    "GenerateTestCasesRequest",
    "AnalyzeTestsRequest",
    "RepairSessionCreate",
    "CodeUpdate",
    "CodeAnalysisRequest",
    "FixResponse",
    "RepairSessionResponse",
]
