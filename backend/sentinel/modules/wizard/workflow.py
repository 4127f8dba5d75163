"""
Project Wizard
==============
Three-phase workflow over the remote project store:

    1. Configuration - project name, module, test kind and parameters
    2. Generation    - generate, review and hand-edit test cases
    3. Analysis      - score the suite, review insights, export

The visible phase can move back freely; the stored phase only ever moves
forward. Store failures never raise out of a step: they set `banner` and
remember the step so `retry()` can run it again.
"""

from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from sentinel.client.store_client import ProjectStoreClient
from sentinel.core.exceptions import RemoteStoreError, ValidationError
from sentinel.core.logging_config import logger
from sentinel.models.project import WizardPhase
from sentinel.modules.wizard.draft import TestCaseDraft

StepFactory = Callable[[], Awaitable[Any]]


class ProjectWizard:
    def __init__(self, store: ProjectStoreClient, project: Optional[Dict[str, Any]] = None):
        self.store = store
        self.project = project
        self.phase: int = project["current_phase"] if project else WizardPhase.CONFIGURATION.value
        self.test_cases: List[Dict[str, Any]] = []
        self.analysis: Optional[Dict[str, Any]] = None
        self.banner: Optional[str] = None
        self._failed_step: Optional[Tuple[str, StepFactory]] = None

    @classmethod
    async def open(cls, store: ProjectStoreClient, project_id: str) -> "ProjectWizard":
        """Resume an existing project at its stored phase"""
        return cls(store, await store.get_project(project_id))

    @property
    def stored_phase(self) -> int:
        return self.project["current_phase"] if self.project else WizardPhase.CONFIGURATION.value

    @property
    def failed_step(self) -> Optional[str]:
        return self._failed_step[0] if self._failed_step else None

    def _require_project(self) -> Dict[str, Any]:
        if self.project is None:
            raise ValidationError("Project configuration has not been submitted")
        return self.project

    async def _step(self, label: str, factory: StepFactory) -> Any:
        try:
            result = await factory()
        except RemoteStoreError as e:
            self.banner = f"{label} failed: {e.message}"
            self._failed_step = (label, factory)
            logger.warning(f"[Wizard] {label} failed: {e.message}")
            return None

        self.banner = None
        self._failed_step = None
        return result

    def dismiss_banner(self) -> None:
        self.banner = None

    async def retry(self) -> Any:
        """Re-run the last failed step; no-op when nothing failed"""
        if self._failed_step is None:
            return None
        label, factory = self._failed_step
        logger.info(f"[Wizard] Retrying: {label}")
        return await self._step(label, factory)

    def back(self) -> int:
        """Show the previous phase; the stored phase is untouched"""
        self.phase = max(WizardPhase.CONFIGURATION.value, self.phase - 1)
        return self.phase

    async def _commit_phase(self, phase: int) -> None:
        project = self._require_project()
        target = max(project["current_phase"], phase)
        self.project = await self.store.set_phase(project["id"], target)
        self.phase = phase

    # ---------- phase 1 ----------

    async def submit_configuration(
        self,
        name: str,
        module_name: str,
        test_kind: str = "unit",
        parameters: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        payload = {
            "name": name,
            "module_name": module_name,
            "test_kind": test_kind,
            "parameters": parameters or {},
        }

        async def submit():
            if self.project is None:
                self.project = await self.store.create_project(payload)
            else:
                self.project = await self.store.update_project(self.project["id"], payload)
            await self._commit_phase(WizardPhase.GENERATION.value)
            return self.project

        return await self._step("Saving project", submit)

    # ---------- phase 2 ----------

    async def load_test_cases(self) -> List[Dict[str, Any]]:
        """Fetch the project's test cases, generating a starter set when there are none"""
        project = self._require_project()

        async def load():
            self.test_cases = await self.store.list_test_cases(project["id"])
            return self.test_cases

        cases = await self._step("Loading test cases", load)
        if cases is not None and not cases:
            await self.generate_test_cases()
        return self.test_cases

    async def generate_test_cases(self) -> List[Dict[str, Any]]:
        project = self._require_project()

        async def generate():
            await self.store.generate_test_cases(
                project["id"],
                project["name"],
                project["module_name"],
                project["test_kind"],
                project.get("parameters") or {},
            )
            self.test_cases = await self.store.list_test_cases(project["id"])
            return self.test_cases

        await self._step("Generating test cases", generate)
        return self.test_cases

    async def save_test_case(
        self, draft: TestCaseDraft, test_case_id: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Create a test case, or update `test_case_id` when given.

        Bad JSON in the draft raises InvalidTestCaseInputError before anything
        is sent.
        """
        project = self._require_project()
        payload = draft.to_payload()

        async def save():
            if test_case_id is None:
                saved = await self.store.create_test_case(project["id"], payload)
                self.test_cases.insert(0, saved)
            else:
                saved = await self.store.update_test_case(project["id"], test_case_id, payload)
                self.test_cases = [saved if tc["id"] == saved["id"] else tc for tc in self.test_cases]
            return saved

        return await self._step("Saving test case", save)

    async def delete_test_case(self, test_case_id: str) -> bool:
        project = self._require_project()

        async def delete():
            await self.store.delete_test_case(project["id"], test_case_id)
            self.test_cases = [tc for tc in self.test_cases if tc["id"] != test_case_id]
            return True

        return bool(await self._step("Deleting test case", delete))

    def priority_stats(self) -> Dict[str, int]:
        stats = {"high": 0, "medium": 0, "low": 0}
        for tc in self.test_cases:
            if tc.get("priority") in stats:
                stats[tc["priority"]] += 1
        stats["total"] = len(self.test_cases)
        return stats

    async def complete_generation(self) -> bool:
        async def complete():
            await self._commit_phase(WizardPhase.ANALYSIS.value)
            return True

        return bool(await self._step("Advancing to analysis", complete))

    # ---------- phase 3 ----------

    async def load_analysis(self) -> Optional[Dict[str, Any]]:
        """Latest analysis of the project, running one when none is stored"""
        project = self._require_project()

        async def load():
            self.test_cases = await self.store.list_test_cases(project["id"])
            return await self.store.latest_analysis(project["id"])

        found = await self._step("Loading analysis", load)
        if found is not None:
            self.analysis = found
        elif self._failed_step is None:
            await self.run_analysis()
        return self.analysis

    async def run_analysis(self) -> Optional[Dict[str, Any]]:
        project = self._require_project()

        async def analyze():
            self.analysis = await self.store.analyze_tests(project["id"], project["test_kind"])
            return self.analysis

        await self._step("Analyzing test cases", analyze)
        return self.analysis

    async def export_analysis(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        """(filename, document) for the project's analysis export"""
        project = self._require_project()
        return await self._step("Exporting analysis", lambda: self.store.export_analysis(project["id"]))
