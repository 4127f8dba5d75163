"""
Project Service - projects, test cases and analysis results for one owner

Every lookup is owner-scoped: a project that exists but belongs to someone
else is reported exactly like a missing one.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from sentinel.core.exceptions import (
    ProjectNotFoundError,
    TestCaseNotFoundError,
    PhaseRegressionError,
)
from sentinel.core.logging_config import logger
from sentinel.models.analysis_result import AnalysisResult
from sentinel.models.project import Project
from sentinel.models.test_case import TestCase, TestStatus
from sentinel.schemas.project import ProjectCreate, ProjectUpdate
from sentinel.schemas.test_case import TestCaseCreate, TestCaseUpdate
from sentinel.services.test_analysis import test_suite_analyzer
from sentinel.services.test_case_generator import test_case_generator

WHITESPACE_RUN = re.compile(r'\s+')

# NOT NULL columns; an explicit null in a PATCH body leaves them unchanged
PROJECT_REQUIRED_FIELDS = frozenset({"name", "module_name", "test_kind"})
TEST_CASE_REQUIRED_FIELDS = frozenset({"title", "priority", "status"})


def analysis_export_filename(project_name: str) -> str:
    return f"{WHITESPACE_RUN.sub('-', project_name)}-analysis.json"


def apply_changes(target: Any, changes: Dict[str, Any], required: frozenset) -> None:
    for field_name, value in changes.items():
        if value is None and field_name in required:
            continue
        setattr(target, field_name, value)


class ProjectService:
    """Data access for the project wizard and the two scoring functions"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========== Projects ==========

    async def create_project(self, user_id: str, data: ProjectCreate) -> Project:
        project = Project(
            user_id=str(user_id),
            name=data.name,
            module_name=data.module_name,
            test_kind=data.test_kind,
            parameters=data.parameters.model_dump(exclude_none=True) if data.parameters else {},
        )
        self.db.add(project)
        await self.db.commit()
        await self.db.refresh(project)
        logger.info(f"[Projects] Created project {project.id} for user {user_id}")
        return project

    async def list_projects(self, user_id: str) -> List[Project]:
        result = await self.db.execute(
            select(Project)
            .where(Project.user_id == str(user_id))
            .order_by(Project.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_project(self, project_id: str, user_id: str) -> Project:
        result = await self.db.execute(
            select(Project).where(
                Project.id == str(project_id),
                Project.user_id == str(user_id),
            )
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise ProjectNotFoundError(str(project_id))
        return project

    async def update_project(self, project: Project, data: ProjectUpdate) -> Project:
        changes = data.model_dump(exclude_unset=True)
        if "parameters" in changes:
            changes["parameters"] = (
                data.parameters.model_dump(exclude_none=True) if data.parameters else {}
            )
        apply_changes(project, changes, PROJECT_REQUIRED_FIELDS)
        await self.db.commit()
        await self.db.refresh(project)
        return project

    async def set_phase(self, project: Project, phase: int) -> Project:
        """Move the stored phase forward; requesting an earlier phase is rejected"""
        if phase < project.current_phase:
            raise PhaseRegressionError(project.current_phase, phase)
        if phase != project.current_phase:
            project.current_phase = phase
            await self.db.commit()
            await self.db.refresh(project)
            logger.info(f"[Projects] Project {project.id} advanced to phase {phase}")
        return project

    async def delete_project(self, project: Project) -> None:
        await self.db.delete(project)
        await self.db.commit()
        logger.info(f"[Projects] Deleted project {project.id}")

    # ========== Test cases ==========

    async def list_test_cases(self, project_id: str) -> List[TestCase]:
        result = await self.db.execute(
            select(TestCase)
            .where(TestCase.project_id == str(project_id))
            .order_by(TestCase.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_test_case(self, project_id: str, test_case_id: str) -> TestCase:
        result = await self.db.execute(
            select(TestCase).where(
                TestCase.id == str(test_case_id),
                TestCase.project_id == str(project_id),
            )
        )
        test_case = result.scalar_one_or_none()
        if test_case is None:
            raise TestCaseNotFoundError(str(test_case_id))
        return test_case

    async def create_test_case(self, project_id: str, data: TestCaseCreate) -> TestCase:
        test_case = TestCase(project_id=str(project_id), **data.model_dump())
        self.db.add(test_case)
        await self.db.commit()
        await self.db.refresh(test_case)
        return test_case

    async def update_test_case(self, test_case: TestCase, data: TestCaseUpdate) -> TestCase:
        apply_changes(test_case, data.model_dump(exclude_unset=True), TEST_CASE_REQUIRED_FIELDS)
        await self.db.commit()
        await self.db.refresh(test_case)
        return test_case

    async def delete_test_case(self, test_case: TestCase) -> None:
        await self.db.delete(test_case)
        await self.db.commit()

    async def generate_test_cases(
        self,
        project_id: str,
        module_name: str,
        test_kind: Optional[str],
        parameters: Optional[Dict[str, Any]] = None,
    ) -> List[TestCase]:
        """Insert the scenario table for `test_kind` as pending test cases"""
        rows = [
            TestCase(project_id=str(project_id), status=TestStatus.PENDING, **scenario)
            for scenario in test_case_generator.generate(module_name, test_kind, parameters)
        ]
        self.db.add_all(rows)
        await self.db.commit()
        for row in rows:
            await self.db.refresh(row)

        logger.info(f"[Projects] Generated {len(rows)} {test_kind} test cases for project {project_id}")
        return rows

    # ========== Analysis ==========

    async def analyze_tests(self, project_id: str, test_kind: Optional[str]) -> AnalysisResult:
        """Score the stored test cases and append a new AnalysisResult row"""
        test_cases = await self.list_test_cases(project_id)
        analysis = test_suite_analyzer.analyze(test_cases, test_kind)

        result = AnalysisResult(
            project_id=str(project_id),
            coverage_level=analysis.coverage_level,
            insights=analysis.insights,
            errors=analysis.errors,
            recommendations=analysis.recommendations,
        )
        self.db.add(result)
        await self.db.commit()
        await self.db.refresh(result)

        logger.info(
            f"[Projects] Analysis for project {project_id}: "
            f"{len(test_cases)} tests, coverage {analysis.coverage_level}%"
        )
        return result

    async def latest_analysis(self, project_id: str) -> Optional[AnalysisResult]:
        result = await self.db.execute(
            select(AnalysisResult)
            .where(AnalysisResult.project_id == str(project_id))
            .order_by(AnalysisResult.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def export_analysis(self, project: Project) -> Tuple[str, Dict[str, Any]]:
        test_cases = await self.list_test_cases(project.id)
        analysis = await self.latest_analysis(project.id)

        document = {
            "project": {
                "name": project.name,
                "module": project.module_name,
                "testType": getattr(project.test_kind, "value", project.test_kind),
            },
            "testCases": [
                {
                    "title": tc.title,
                    "description": tc.description,
                    "priority": getattr(tc.priority, "value", tc.priority),
                    "status": getattr(tc.status, "value", tc.status),
                    "input": tc.input,
                    "expectedOutput": tc.expected_output,
                }
                for tc in test_cases
            ],
            "analysis": {
                "coverageLevel": analysis.coverage_level,
                "insights": analysis.insights,
                "errors": analysis.errors,
                "recommendations": analysis.recommendations,
            } if analysis else None,
        }
        return analysis_export_filename(project.name), document
