"""
Unit Tests for ProjectService
"""
import pytest

from sentinel.core.exceptions import ProjectNotFoundError, PhaseRegressionError, TestCaseNotFoundError
from sentinel.models.project import TestKind, WizardPhase
from sentinel.models.test_case import TestStatus
from sentinel.schemas.project import ProjectCreate, ProjectUpdate
from sentinel.schemas.test_case import TestCaseCreate, TestCaseUpdate
from sentinel.services.project_service import ProjectService, analysis_export_filename


@pytest.fixture
def service(db_session):
    return ProjectService(db_session)


@pytest.fixture
async def stored_project(service, test_user):
    return await service.create_project(
        str(test_user.id),
        ProjectCreate(
            name="Inventory Sync",
            module_name="StockLedger",
            test_kind=TestKind.UNIT,
            parameters={"expectedInputs": "sku list"},
        ),
    )


class TestProjects:
    """Test owner-scoped project access"""

    async def test_create_starts_in_first_phase(self, stored_project):
        assert stored_project.current_phase == WizardPhase.CONFIGURATION.value
        assert stored_project.parameters == {"expectedInputs": "sku list"}

    async def test_other_owner_sees_not_found(self, service, stored_project, other_user):
        """Test a foreign project is indistinguishable from a missing one"""
        with pytest.raises(ProjectNotFoundError):
            await service.get_project(str(stored_project.id), str(other_user.id))

    async def test_list_projects(self, service, stored_project, test_user, other_user):
        assert [p.id for p in await service.list_projects(str(test_user.id))] == [stored_project.id]
        assert await service.list_projects(str(other_user.id)) == []

    async def test_partial_update(self, service, stored_project):
        """Test unset fields are left alone"""
        updated = await service.update_project(stored_project, ProjectUpdate(name="Inventory Sync v2"))

        assert updated.name == "Inventory Sync v2"
        assert updated.module_name == "StockLedger"

    async def test_phase_moves_forward(self, service, stored_project):
        project = await service.set_phase(stored_project, WizardPhase.ANALYSIS.value)
        assert project.current_phase == 3

    async def test_phase_same_is_noop(self, service, stored_project):
        project = await service.set_phase(stored_project, 1)
        assert project.current_phase == 1

    async def test_phase_regression_rejected(self, service, stored_project):
        """Test the stored phase never moves backwards"""
        await service.set_phase(stored_project, 3)

        with pytest.raises(PhaseRegressionError) as exc_info:
            await service.set_phase(stored_project, 2)
        assert exc_info.value.code == "PHASE_REGRESSION"
        assert stored_project.current_phase == 3


class TestTestCases:
    """Test test case storage and generation"""

    async def test_generate_inserts_pending_rows(self, service, stored_project):
        rows = await service.generate_test_cases(stored_project.id, "StockLedger", "unit", stored_project.parameters)

        assert len(rows) == 5
        assert all(row.status == TestStatus.PENDING for row in rows)
        assert rows[0].input == {"valid": True, "data": "sku list"}
        assert len(await service.list_test_cases(stored_project.id)) == 5

    async def test_create_update_delete(self, service, stored_project):
        test_case = await service.create_test_case(
            stored_project.id,
            TestCaseCreate(title="Negative quantity", input={"qty": -1}, expected_output={"error": True}),
        )
        updated = await service.update_test_case(test_case, TestCaseUpdate(status=TestStatus.FAILED))

        assert updated.status == TestStatus.FAILED
        assert updated.title == "Negative quantity"

        await service.delete_test_case(updated)
        with pytest.raises(TestCaseNotFoundError):
            await service.get_test_case(stored_project.id, test_case.id)


class TestAnalysis:
    """Test analysis results"""

    async def test_no_analysis_yet(self, service, stored_project):
        assert await service.latest_analysis(stored_project.id) is None

    async def test_analyze_appends_result(self, service, stored_project):
        await service.generate_test_cases(stored_project.id, "StockLedger", "unit")
        result = await service.analyze_tests(stored_project.id, "unit")

        # 5 cases, 2 high priority
        assert result.coverage_level == 85
        latest = await service.latest_analysis(stored_project.id)
        assert latest.id == result.id

    async def test_export_document(self, service, stored_project):
        await service.generate_test_cases(stored_project.id, "StockLedger", "unit")
        await service.analyze_tests(stored_project.id, "unit")

        filename, document = await service.export_analysis(stored_project)

        assert filename == "Inventory-Sync-analysis.json"
        assert document["project"] == {"name": "Inventory Sync", "module": "StockLedger", "testType": "unit"}
        assert len(document["testCases"]) == 5
        assert document["analysis"]["coverageLevel"] == 85

    async def test_export_without_analysis(self, service, stored_project):
        _, document = await service.export_analysis(stored_project)

        assert document["testCases"] == []
        assert document["analysis"] is None


class TestExportFilename:

    @pytest.mark.parametrize("name,expected", [
        ("Payment Gateway", "Payment-Gateway-analysis.json"),
        ("a  b\tc", "a-b-c-analysis.json"),
        ("single", "single-analysis.json"),
    ])
    def test_whitespace_runs_become_dashes(self, name, expected):
        assert analysis_export_filename(name) == expected
