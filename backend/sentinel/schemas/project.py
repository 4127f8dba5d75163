from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Dict, List, Any
from datetime import datetime
from uuid import UUID

from sentinel.models.project import TestKind


class ProjectParameters(BaseModel):
    """Free-form parameters captured in wizard phase 1"""
    expectedInputs: Optional[str] = None
    expectedOutputs: Optional[str] = None
    additionalParams: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class ProjectCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    module_name: str = Field(..., min_length=1, max_length=255)
    test_kind: TestKind = TestKind.UNIT
    parameters: Optional[ProjectParameters] = None


class ProjectUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    module_name: Optional[str] = Field(None, min_length=1, max_length=255)
    test_kind: Optional[TestKind] = None
    parameters: Optional[ProjectParameters] = None


class PhaseUpdate(BaseModel):
    phase: int = Field(..., ge=1, le=3)


class ProjectResponse(BaseModel):
    id: UUID
    user_id: UUID
    name: str
    module_name: str
    test_kind: TestKind
    parameters: Optional[Dict[str, Any]] = None
    current_phase: int
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ProjectListResponse(BaseModel):
    projects: List[ProjectResponse]
    total: int
