from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional

from sentinel.models.user import User
from sentinel.modules.analyzers.language_support import get_language_analysis
from sentinel.modules.analyzers.test_runner import pass_rate
from sentinel.modules.auth.dependencies import get_current_user
from sentinel.modules.repair.orchestrator import RepairOrchestrator
from sentinel.modules.repair.session import RepairSession
from sentinel.modules.repair.session_store import repair_sessions
from sentinel.schemas.repair import (
    RepairSessionCreate,
    CodeUpdate,
    CodeAnalysisRequest,
    FixResponse,
    RepairSessionResponse,
)

router = APIRouter()


def _orchestrator(session_id: str, current_user: User) -> RepairOrchestrator:
    return RepairOrchestrator(repair_sessions.get(session_id, str(current_user.id)))


def _snapshot(orchestrator: RepairOrchestrator) -> Dict[str, Any]:
    return {**orchestrator.session.to_dict(), "metrics": orchestrator.metrics()}


def _fix_response(orchestrator: RepairOrchestrator, finding_id: Optional[str] = None) -> FixResponse:
    session = orchestrator.session
    return FixResponse(
        finding_id=finding_id,
        current_code=session.current_code,
        applied_fix_ids=sorted(session.applied_fix_ids),
        issues_fixed=session.history[-1].issues_fixed if session.history else 0,
        banner=session.banner,
    )


@router.post("/analyze")
async def analyze_code(
    body: CodeAnalysisRequest,
    current_user: User = Depends(get_current_user)
):
    """Run every analyzer over a code string without keeping a session"""
    orchestrator = RepairOrchestrator(RepairSession(user_id=str(current_user.id)), analysis_delay=0)
    orchestrator.edit(body.code)
    await orchestrator.analyze()
    session = orchestrator.session

    return {
        **_snapshot(orchestrator),
        "language_analysis": get_language_analysis(session.current_code, session.language),
    }


@router.post("/sessions", response_model=RepairSessionResponse, status_code=status.HTTP_201_CREATED)
async def create_session(
    body: RepairSessionCreate,
    current_user: User = Depends(get_current_user)
):
    orchestrator = RepairOrchestrator(RepairSession(user_id=str(current_user.id)))
    # Oversized code raises here, before the session is stored
    orchestrator.edit(body.code)
    repair_sessions.add(orchestrator.session)
    return _snapshot(orchestrator)


@router.get("/sessions")
async def list_sessions(current_user: User = Depends(get_current_user)):
    """Live repair sessions owned by the caller"""
    sessions = repair_sessions.list_for_user(str(current_user.id))
    return {
        "sessions": [
            {"id": s.id, "state": s.state.value, "language": s.language.value, "last_accessed": s.last_accessed.isoformat()}
            for s in sessions
        ],
        "total": len(sessions),
    }


@router.get("/sessions/{session_id}", response_model=RepairSessionResponse)
async def get_session(session_id: str, current_user: User = Depends(get_current_user)):
    return _snapshot(_orchestrator(session_id, current_user))


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, current_user: User = Depends(get_current_user)):
    repair_sessions.delete(session_id, str(current_user.id))


@router.put("/sessions/{session_id}/code", response_model=RepairSessionResponse)
async def update_code(
    session_id: str,
    body: CodeUpdate,
    current_user: User = Depends(get_current_user)
):
    """Replace the working buffer; the first non-empty buffer becomes the original"""
    orchestrator = _orchestrator(session_id, current_user)
    orchestrator.edit(body.code)
    return _snapshot(orchestrator)


@router.post("/sessions/{session_id}/analyze", response_model=RepairSessionResponse)
async def analyze_session(session_id: str, current_user: User = Depends(get_current_user)):
    orchestrator = _orchestrator(session_id, current_user)
    await orchestrator.analyze()
    return _snapshot(orchestrator)


@router.post("/sessions/{session_id}/fixes/apply-all", response_model=FixResponse)
async def apply_all_fixes(session_id: str, current_user: User = Depends(get_current_user)):
    orchestrator = _orchestrator(session_id, current_user)
    orchestrator.apply_all()
    return _fix_response(orchestrator)


@router.post("/sessions/{session_id}/fixes/{finding_id}", response_model=FixResponse)
async def apply_fix(
    session_id: str,
    finding_id: str,
    current_user: User = Depends(get_current_user)
):
    orchestrator = _orchestrator(session_id, current_user)
    orchestrator.apply_fix(finding_id)
    return _fix_response(orchestrator, finding_id)


@router.post("/sessions/{session_id}/smart-repair", response_model=FixResponse)
async def smart_repair(session_id: str, current_user: User = Depends(get_current_user)):
    """Apply pending fixes most-severe first"""
    orchestrator = _orchestrator(session_id, current_user)
    fixed = orchestrator.smart_repair()
    response = _fix_response(orchestrator)
    response.issues_fixed = fixed
    return response


@router.post("/sessions/{session_id}/reset", response_model=RepairSessionResponse)
async def reset_session(session_id: str, current_user: User = Depends(get_current_user)):
    orchestrator = _orchestrator(session_id, current_user)
    orchestrator.reset()
    return _snapshot(orchestrator)


@router.post("/sessions/{session_id}/performance")
async def run_performance_tests(session_id: str, current_user: User = Depends(get_current_user)):
    orchestrator = _orchestrator(session_id, current_user)
    results = await orchestrator.run_performance_tests()
    return {
        "results": [r.to_dict() for r in results],
        "banner": orchestrator.session.banner,
    }


@router.post("/sessions/{session_id}/tests/run")
async def run_generated_tests(session_id: str, current_user: User = Depends(get_current_user)):
    """Simulated run of the generated test cases; nothing is executed"""
    orchestrator = _orchestrator(session_id, current_user)
    results = await orchestrator.run_tests()
    return {
        "results": [r.to_dict() for r in results],
        "pass_rate": pass_rate(results),
    }


@router.get("/sessions/{session_id}/report")
async def export_report(session_id: str, current_user: User = Depends(get_current_user)):
    """Download the full repair report as a JSON attachment"""
    filename, report = _orchestrator(session_id, current_user).export_report()
    return JSONResponse(
        content=report,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
