"""
Mock adapter — universal test double for all adapter operations.

Used in mock mode to simulate adapter behavior without touching
external tools. Configurable to return success, failure, or a
scripted sequence of receipts per operation.
"""

from __future__ import annotations

from rnclean.adapters.base import Adapter, ExecutionContext
from rnclean.core.models.operation import Receipt


class MockAdapter(Adapter):
    """Universal mock adapter for testing.

    By default, returns success for everything. Can be configured
    with custom responses per operation ID. Scripted responses are
    consumed one per call; once exhausted, the fixed response (or the
    default success) applies.
    """

    def __init__(
        self,
        adapter_name: str = "mock",
        default_output: str = "[mock] executed",
    ):
        self._name = adapter_name
        self._default_output = default_output
        self._responses: dict[str, Receipt] = {}
        self._scripts: dict[str, list[Receipt]] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    def calls_for(self, operation_id: str) -> int:
        """Number of times a specific operation was executed."""
        return sum(1 for c in self._call_log if c.operation.id == operation_id)

    def set_response(self, operation_id: str, receipt: Receipt) -> None:
        """Set a fixed response for a specific operation ID."""
        self._responses[operation_id] = receipt

    def set_failure(self, operation_id: str, error: str = "Mock failure", output: str = "") -> None:
        """Configure a specific operation to always fail."""
        self._responses[operation_id] = Receipt.failure(
            adapter=self._name,
            operation_id=operation_id,
            error=error,
            output=output,
        )

    def script(self, operation_id: str, *receipts: Receipt) -> None:
        """Queue receipts returned by successive calls for one operation."""
        self._scripts.setdefault(operation_id, []).extend(receipts)

    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        return True, ""

    def execute(self, context: ExecutionContext) -> Receipt:
        self._call_log.append(context)
        op_id = context.operation.id

        queued = self._scripts.get(op_id)
        if queued:
            return queued.pop(0)

        if op_id in self._responses:
            return self._responses[op_id]

        return Receipt.success(
            adapter=self._name,
            operation_id=op_id,
            output=self._default_output,
            metadata={"mock": True},
        )
