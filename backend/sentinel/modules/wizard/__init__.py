from sentinel.modules.wizard.draft import TestCaseDraft
from sentinel.modules.wizard.workflow import ProjectWizard

__all__ = ["TestCaseDraft", "ProjectWizard"]
