"""
Scoring functions - the two remote calls the wizard makes

Contract: `{"success": true, "data": ...}` on success, HTTP 500 with
`{"error": "<message>"}` on any failure. Callers get no retry guarantee.
"""

from typing import Callable

from fastapi import APIRouter, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from fastapi.routing import APIRoute

from sentinel.core.logging_config import logger, set_project_id
from sentinel.models.user import User
from sentinel.schemas.analysis import GenerateTestCasesRequest, AnalyzeTestsRequest, AnalysisResultResponse
from sentinel.schemas.test_case import TestCaseResponse
from sentinel.modules.auth.dependencies import get_current_user, get_project_service
from sentinel.services.project_service import ProjectService


def _error(message: str) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": message})


def _failure(operation: str, error: Exception) -> JSONResponse:
    logger.log_error_with_context(error, context=f"functions:{operation}")
    return _error(str(error))


def validation_message(exc: RequestValidationError) -> str:
    """Flatten pydantic errors into `field: reason` pairs"""
    parts = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error.get("loc", ())[1:])
        parts.append(f"{field}: {error.get('msg')}" if field else str(error.get("msg")))
    return "; ".join(parts) or "Invalid request body"


class FunctionRoute(APIRoute):
    """Reports malformed bodies in the same `{"error": ...}` shape as other failures"""

    def get_route_handler(self) -> Callable:
        handler = super().get_route_handler()

        async def route_handler(request: Request) -> Response:
            try:
                return await handler(request)
            except RequestValidationError as exc:
                message = validation_message(exc)
                logger.warning(f"[Functions] Rejected {request.url.path}: {message}")
                return _error(message)

        return route_handler


router = APIRouter(route_class=FunctionRoute)


@router.post("/generate-test-cases")
async def generate_test_cases(
    body: GenerateTestCasesRequest,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """Insert the fixed scenario set for the requested test kind"""
    try:
        project = await service.get_project(str(body.projectId), str(current_user.id))
        set_project_id(str(project.id))
        rows = await service.generate_test_cases(
            project.id,
            body.moduleName,
            body.testKind,
            body.parameters or project.parameters or {},
        )
        data = [TestCaseResponse.model_validate(row).model_dump(mode="json") for row in rows]
    except Exception as e:
        return _failure("generate-test-cases", e)

    return {"success": True, "data": data}


@router.post("/analyze-tests")
async def analyze_tests(
    body: AnalyzeTestsRequest,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service)
):
    """Score the project's stored test cases and append an AnalysisResult"""
    try:
        project = await service.get_project(str(body.projectId), str(current_user.id))
        set_project_id(str(project.id))
        result = await service.analyze_tests(project.id, body.testKind)
        data = AnalysisResultResponse.model_validate(result).model_dump(mode="json")
    except Exception as e:
        return _failure("analyze-tests", e)

    return {"success": True, "data": data}
