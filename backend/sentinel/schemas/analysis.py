from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import Optional, Dict, List, Any
from datetime import datetime
from uuid import UUID


class AnalysisResultResponse(BaseModel):
    id: UUID
    project_id: UUID
    coverage_level: int
    insights: List[Dict[str, Any]] = []
    errors: List[Dict[str, Any]] = []
    recommendations: List[Dict[str, Any]] = []
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GenerateTestCasesRequest(BaseModel):
    """Body of POST /functions/generate-test-cases"""
    projectId: UUID
    projectName: Optional[str] = None
    moduleName: str
    testKind: str = Field("unit", validation_alias=AliasChoices("testKind", "testType"))
    parameters: Optional[Dict[str, Any]] = None


class AnalyzeTestsRequest(BaseModel):
    """Body of POST /functions/analyze-tests"""
    projectId: UUID
    testKind: str = Field("unit", validation_alias=AliasChoices("testKind", "testType"))
