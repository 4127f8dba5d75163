from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from sentinel.core.exceptions import AnalysisNotFoundError
from sentinel.core.logging_config import logger
from sentinel.models.user import User
from sentinel.models.project import Project
from sentinel.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    PhaseUpdate,
    ProjectResponse,
    ProjectListResponse,
)
from sentinel.schemas.analysis import AnalysisResultResponse
from sentinel.modules.auth.dependencies import get_current_user, get_user_project, get_project_service
from sentinel.services.project_service import ProjectService

router = APIRouter()


@router.post("", response_model=ProjectResponse, status_code=status.HTTP_201_CREATED)
async def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """Create a project in phase 1"""
    return await service.create_project(str(current_user.id), project_data)


@router.get("", response_model=ProjectListResponse)
async def list_projects(
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """List the caller's projects, newest first"""
    projects = await service.list_projects(str(current_user.id))
    logger.info(f"[Projects] Found {len(projects)} projects for user {current_user.email}")
    return {"projects": projects, "total": len(projects)}


@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project: Project = Depends(get_user_project)):
    """Get project details"""
    return project


@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_data: ProjectUpdate,
    project: Project = Depends(get_user_project),
    service: ProjectService = Depends(get_project_service)
):
    return await service.update_project(project, project_data)


@router.post("/{project_id}/phase", response_model=ProjectResponse)
async def advance_phase(
    phase_data: PhaseUpdate,
    project: Project = Depends(get_user_project),
    service: ProjectService = Depends(get_project_service)
):
    """
    Move the stored wizard phase forward.

    Requesting the current phase is a no-op; an earlier phase is rejected
    with 400 PHASE_REGRESSION.
    """
    return await service.set_phase(project, phase_data.phase)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project: Project = Depends(get_user_project),
    service: ProjectService = Depends(get_project_service)
):
    """Delete a project together with its test cases and analysis results"""
    await service.delete_project(project)


@router.get("/{project_id}/analysis/latest", response_model=AnalysisResultResponse)
async def get_latest_analysis(
    project: Project = Depends(get_user_project),
    service: ProjectService = Depends(get_project_service)
):
    analysis = await service.latest_analysis(project.id)
    if analysis is None:
        raise AnalysisNotFoundError(str(project.id))
    return analysis


@router.get("/{project_id}/analysis/export")
async def export_analysis(
    project: Project = Depends(get_user_project),
    service: ProjectService = Depends(get_project_service)
):
    """Download project, test cases and latest analysis as a JSON attachment"""
    filename, document = await service.export_analysis(project)
    return JSONResponse(
        content=document,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'}
    )
