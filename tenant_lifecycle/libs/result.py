"""
Result type shared by use cases and routes.

Use cases never raise across their public boundary: they return either
``Return.ok(value)`` or ``Return.err(Error(code, message))``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Error:
    """Failure value with a stable machine code and a human-readable message"""

    code: str
    message: str
    details: Optional[Dict[str, Any]] = field(default=None)


class Result(Generic[T]):
    """Either a value (ok) or an Error (err)"""

    __slots__ = ("_value", "_error")

    def __init__(self, value: Optional[T] = None, error: Optional[Error] = None):
        self._value = value
        self._error = error

    def is_ok(self) -> bool:
        return self._error is None

    def is_err(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> T:
        if self._error is not None:
            raise ValueError(f"Result is an error: {self._error.code}")
        return self._value

    @property
    def error(self) -> Error:
        if self._error is None:
            raise ValueError("Result is ok")
        return self._error

    def to_action(self) -> Dict[str, Any]:
        """
        Discriminated action payload consumed by the UI layer:
        ``{"success": True, **data}`` or ``{"success": False, "error": message}``.
        """
        if self._error is not None:
            return {"success": False, "error": self._error.message, "code": self._error.code}
        data = self._value
        if data is None:
            return {"success": True}
        if hasattr(data, "model_dump"):
            data = data.model_dump(mode="json")
        return {**data, "success": True}

    def __repr__(self) -> str:
        if self._error is not None:
            return f"Err({self._error.code})"
        return f"Ok({self._value!r})"


class Return:
    """Constructors for Result"""

    @staticmethod
    def ok(value: Optional[T] = None) -> Result[T]:
        return Result(value=value)

    @staticmethod
    def err(error: Error) -> Result[Any]:
        return Result(error=error)
