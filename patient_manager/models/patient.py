import math
import re
from enum import Enum
from typing import Any, List, Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

# Tests added above this value mark the patient critical; updates use a higher bar.
ADD_TEST_CRITICAL_THRESHOLD = 5
UPDATE_TEST_CRITICAL_THRESHOLD = 6

_LEADING_FLOAT = re.compile(r"^[+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")


class PatientCondition(str, Enum):
    NORMAL = "normal"
    CRITICAL = "critical"


class DiagnosticTest(BaseModel):
    name: Optional[str] = Field(..., description="Test name, e.g. glucose")
    value: Optional[str] = Field(..., description="Measured value, compared numerically")
    id: str = Field(default_factory=lambda: str(uuid4()), description="Stable test identifier")

    @field_validator("name", "value", mode="before")
    @classmethod
    def cast_to_string(cls, v):
        return to_test_string(v)


class Patient(BaseModel):
    id: Optional[str] = Field(default=None, description="Unique patient ID")
    name: Any = Field(..., description="Patient full name")
    age: Any = Field(..., description="Patient age in years")
    email: Any = Field(..., description="Contact email")
    phone_number: Any = Field(..., description="Contact phone number")
    house_address: Any = Field(..., description="Home address")
    condition: PatientCondition = Field(default=PatientCondition.NORMAL, description="Derived patient status")
    tests: List[DiagnosticTest] = Field(default_factory=list, description="Diagnostic tests, newest first")

    def to_document(self) -> dict:
        return self.model_dump(mode="json", exclude={"id"})


def to_test_string(value: Any) -> Optional[str]:
    """Cast a JSON scalar to the string stored for a test name or value; null stays null."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    raise ValueError(f"cannot store {type(value).__name__} as a test string")


def parse_float(value: Any) -> float:
    """Parse the leading decimal literal of ``value``; NaN when there is none."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    match = _LEADING_FLOAT.match(str(value).lstrip())
    if not match:
        return math.nan
    return float(match.group(0))


def condition_for(value: Any, threshold: float) -> PatientCondition:
    # NaN compares False, so unparseable values leave the patient normal.
    if parse_float(value) > threshold:
        return PatientCondition.CRITICAL
    return PatientCondition.NORMAL
