from dataclasses import dataclass, field
from typing import List


class ShapeError(ValueError):
    pass


def _field(obj: dict, key: str, kind: type, default):
    value = obj.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, kind):
        raise ShapeError(f"Field {key} must be {kind.__name__}, got {type(value).__name__}")
    return value


@dataclass(frozen=True)
class ErrorEvent():
    message: str
    timestamp: str

    @classmethod
    def from_json(cls, obj) -> "ErrorEvent":
        if not isinstance(obj, dict):
            raise ShapeError(f"Error entry must be an object, got {type(obj).__name__}")
        return cls(message=_field(obj, "error", str, ""), timestamp=_field(obj, "timestamp", str, ""))


@dataclass(frozen=True)
class ErrorReport():
    customer_id: int = 0
    integration_id: int = 0
    count: int = 0
    errors: List[ErrorEvent] = field(default_factory=list)

    @classmethod
    def from_json(cls, obj) -> "ErrorReport":
        """
        Build a report from the decoded body of the errors endpoint.

        Absent or null fields take their zero value, present fields of the
        wrong type raise ShapeError.
        """
        if not isinstance(obj, dict):
            raise ShapeError(f"Report must be an object, got {type(obj).__name__}")
        return cls(
            customer_id=_field(obj, "customerId", int, 0),
            integration_id=_field(obj, "integrationId", int, 0),
            count=_field(obj, "count", int, 0),
            errors=[ErrorEvent.from_json(e) for e in _field(obj, "errors", list, [])],
        )
