"""Manual test case editor form"""

import json
from dataclasses import dataclass
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from sentinel.core.exceptions import InvalidTestCaseInputError, ValidationError
from sentinel.schemas.test_case import TestCaseCreate


@dataclass
class TestCaseDraft:
    """
    Text fields as the user typed them.

    `input_text` and `expected_output_text` hold JSON source; they are only
    parsed when the draft is submitted.
    """
    __test__ = False

    title: str = ""
    description: str = ""
    input_text: str = "{}"
    expected_output_text: str = "{}"
    priority: str = "medium"
    status: str = "pending"

    @classmethod
    def from_test_case(cls, test_case: Dict[str, Any]) -> "TestCaseDraft":
        """Pre-fill the form from a stored test case"""
        return cls(
            title=test_case.get("title", ""),
            description=test_case.get("description") or "",
            input_text=json.dumps(test_case.get("input"), indent=2),
            expected_output_text=json.dumps(test_case.get("expected_output"), indent=2),
            priority=test_case.get("priority", "medium"),
            status=test_case.get("status", "pending"),
        )

    def to_payload(self) -> Dict[str, Any]:
        try:
            parsed_input = json.loads(self.input_text)
            parsed_output = json.loads(self.expected_output_text)
        except json.JSONDecodeError as e:
            raise InvalidTestCaseInputError() from e

        try:
            payload = TestCaseCreate(
                title=self.title,
                description=self.description,
                input=parsed_input,
                expected_output=parsed_output,
                priority=self.priority,
                status=self.status,
            )
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first["loc"])
            raise ValidationError(f"{field}: {first['msg']}", field=field) from e

        return payload.model_dump(mode="json")
