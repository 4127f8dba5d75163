from pydantic import BaseModel, Field
from typing import Optional, Dict, List, Any


class RepairSessionCreate(BaseModel):
    code: str = ""


class CodeUpdate(BaseModel):
    code: str


class CodeAnalysisRequest(BaseModel):
    """Body of the stateless POST /repair/analyze"""
    code: str = Field(..., description="Source text to analyze")


class FixResponse(BaseModel):
    finding_id: Optional[str] = None
    current_code: str
    applied_fix_ids: List[str]
    issues_fixed: int = 0
    banner: Optional[str] = None


class RepairSessionResponse(BaseModel):
    """Full session snapshot as produced by RepairSession.to_dict()"""
    id: str
    state: str
    original_code: str
    current_code: str
    findings: List[Dict[str, Any]] = []
    applied_fix_ids: List[str] = []
    history: List[Dict[str, Any]] = []
    test_cases: List[Dict[str, Any]] = []
    coverage_report: Optional[Dict[str, Any]] = None
    security_issues: List[Dict[str, Any]] = []
    quality_metrics: Optional[Dict[str, Any]] = None
    memory_profile: Optional[Dict[str, Any]] = None
    performance_results: List[Dict[str, Any]] = []
    test_results: List[Dict[str, Any]] = []
    complexity_profile: Optional[Dict[str, Any]] = None
    optimization_summary: Optional[Dict[str, Any]] = None
    language: str
    banner: Optional[str] = None
    created_at: str
    metrics: Dict[str, int] = {}
