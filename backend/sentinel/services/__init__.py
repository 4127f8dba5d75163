from sentinel.services.test_case_generator import TestCaseGenerator, test_case_generator
from sentinel.services.test_analysis import TestSuiteAnalyzer, SuiteAnalysis, test_suite_analyzer
from sentinel.services.project_service import ProjectService, analysis_export_filename

__all__ = [
    "TestCaseGenerator",
    "test_case_generator",
    "TestSuiteAnalyzer",
    "SuiteAnalysis",
    "test_suite_analyzer",
    "ProjectService",
    "analysis_export_filename",
]
