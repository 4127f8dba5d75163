"""
Custom Exceptions for Project Sentinel
======================================

Three kinds of failure are kept apart:
1. Analyzer faults - caught inside the analyzer boundary, never raised to callers
2. Store faults - RemoteStoreError, surfaced to the wizard as a banner
3. User-input faults - ValidationError subclasses, reject the submission

Usage:
    from sentinel.core.exceptions import ProjectNotFoundError

    if not project:
        raise ProjectNotFoundError(project_id)
"""

from typing import Optional, Any, Dict


class SentinelError(Exception):
    """Base exception for all Sentinel errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication Errors
# ============================================

class AuthenticationError(SentinelError):
    """Bearer credential missing, malformed, expired or for an unknown user"""

    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message, code="AUTH_FAILED")


class InactiveUserError(SentinelError):
    status_code = 403

    def __init__(self):
        super().__init__("User account is inactive", code="USER_INACTIVE")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(SentinelError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper().replace(' ', '_')}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ProjectNotFoundError(ResourceNotFoundError):
    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


class TestCaseNotFoundError(ResourceNotFoundError):
    __test__ = False

    def __init__(self, test_case_id: str):
        super().__init__("Test case", test_case_id)


class AnalysisNotFoundError(ResourceNotFoundError):
    def __init__(self, project_id: str):
        super().__init__("Analysis", project_id)


class RepairSessionNotFoundError(ResourceNotFoundError):
    def __init__(self, session_id: str):
        super().__init__("Repair session", session_id)


class FindingNotFoundError(ResourceNotFoundError):
    def __init__(self, finding_id: str):
        super().__init__("Finding", finding_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(SentinelError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidTestCaseInputError(ValidationError):
    """Manual test case editor received text that is not JSON"""

    def __init__(self, message: str = "Invalid JSON format in input or expected output",
                 field: Optional[str] = None):
        super().__init__(message, field=field)
        self.code = "INVALID_TEST_CASE_JSON"


class PhaseRegressionError(ValidationError):
    """Stored project phase may only move forward"""

    def __init__(self, current_phase: int, requested_phase: int):
        super().__init__(
            f"Cannot move project from phase {current_phase} back to phase {requested_phase}",
            field="current_phase"
        )
        self.code = "PHASE_REGRESSION"
        self.details.update({"current_phase": current_phase, "requested_phase": requested_phase})


class InvalidStateTransitionError(ValidationError):
    """Repair session is not in a state that allows the requested action"""

    def __init__(self, from_state: str, to_state: str):
        super().__init__(f"Invalid repair transition: {from_state} -> {to_state}")
        self.code = "INVALID_STATE_TRANSITION"
        self.details = {"from_state": from_state, "to_state": to_state}


class CodeTooLargeError(ValidationError):
    def __init__(self, size: int, limit: int):
        super().__init__(f"Code buffer is {size} bytes, limit is {limit}", field="code")
        self.code = "CODE_TOO_LARGE"


# ============================================
# Remote Store Errors
# ============================================

class RemoteStoreError(SentinelError):
    """Remote project store call failed"""

    status_code = 502

    def __init__(self, message: str, operation: Optional[str] = None,
                 status: Optional[int] = None):
        super().__init__(message, code="REMOTE_STORE_ERROR")
        if operation:
            self.details["operation"] = operation
        if status is not None:
            self.details["status"] = status


class StoreTimeoutError(RemoteStoreError):
    def __init__(self, operation: str, timeout: float):
        super().__init__(f"Store request '{operation}' timed out after {timeout}s", operation)
        self.code = "STORE_TIMEOUT"


class StoreResponseError(RemoteStoreError):
    def __init__(self, operation: str, status: int, message: str = ""):
        super().__init__(
            f"Store request '{operation}' failed with HTTP {status}" + (f": {message}" if message else ""),
            operation,
            status
        )
        self.code = "STORE_RESPONSE_ERROR"


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: SentinelError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "error": error.to_dict()
    }
