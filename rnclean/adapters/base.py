"""
Adapter base — the protocol contract between engine and tools.

This defines the abstract interface that every adapter must implement.
The runner only talks to adapters through this protocol, never
directly to external tools.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel

from rnclean.core.models.operation import Operation, Receipt


class ExecutionContext(BaseModel):
    """Everything an adapter needs to execute an operation."""

    operation: Operation
    timeout: float | None = None

    @property
    def working_dir(self) -> str:
        """Resolved working directory for the operation."""
        return self.operation.cwd

    @property
    def effective_timeout(self) -> float | None:
        """Operation timeout, falling back to the run-wide default."""
        if self.operation.timeout is not None:
            return self.operation.timeout
        return self.timeout


class Adapter(ABC):
    """Abstract base class for all adapters.

    Adapters perform external side effects and return receipts.
    They NEVER raise exceptions — failures are captured in the Receipt.

    To create a new adapter:
        1. Subclass Adapter
        2. Implement name, validate, execute
        3. Register it in the AdapterRegistry
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The adapter identifier (e.g., 'shell', 'filesystem')."""

    @abstractmethod
    def validate(self, context: ExecutionContext) -> tuple[bool, str]:
        """Validate that the operation can be executed.

        Returns:
            (is_valid, error_message). error_message is empty if valid.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> Receipt:
        """Execute the operation and return a receipt.

        MUST never raise exceptions. All failures are captured
        in the Receipt with status='failed'.
        """

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
