"""
Adapter registry — central dispatch for all adapter operations.

The registry maps an Operation's ``adapter`` name to the adapter that
performs it, validates the operation, and turns every outcome into a
Receipt. The runner and the ownership repair never talk to adapters
directly — always through the registry.

In mock mode nothing is dispatched: every operation succeeds with a
``[mock]`` line naming what would have run.
"""

from __future__ import annotations

import logging
import time

from rnclean.adapters.base import Adapter, ExecutionContext
from rnclean.core.models.operation import Operation, Receipt

logger = logging.getLogger(__name__)


class AdapterRegistry:
    """Name-to-adapter dispatch for cleanup operations."""

    def __init__(self, mock_mode: bool = False):
        self._adapters: dict[str, Adapter] = {}
        self._mock_mode = mock_mode

    @classmethod
    def default(cls, mock_mode: bool = False) -> AdapterRegistry:
        """Registry with the shell and filesystem adapters registered."""
        from rnclean.adapters.shell.command import ShellCommandAdapter
        from rnclean.adapters.shell.filesystem import FilesystemAdapter

        registry = cls(mock_mode=mock_mode)
        registry.register(ShellCommandAdapter())
        registry.register(FilesystemAdapter())
        return registry

    def register(self, adapter: Adapter) -> None:
        """Register an adapter under its name, replacing any previous one."""
        name = adapter.name
        if name in self._adapters:
            logger.warning("Overwriting existing adapter: %s", name)
        self._adapters[name] = adapter
        logger.debug("Registered adapter: %s", name)

    def execute(self, operation: Operation, timeout: float | None = None) -> Receipt:
        """Execute an operation through the adapter it names.

        Resolves the adapter, validates the operation, executes it and
        stamps the duration. Never raises.

        Args:
            operation: The operation to execute.
            timeout: Run-wide default timeout, used when the operation
                carries none.

        Returns:
            Receipt with execution results.
        """
        start_time = time.monotonic()

        if self._mock_mode:
            return Receipt.success(
                adapter=operation.adapter,
                operation_id=operation.id,
                output=f"[mock] {operation.invocation}",
                metadata={"mock": True},
            )

        adapter = self._adapters.get(operation.adapter)
        if adapter is None:
            return Receipt.failure(
                adapter=operation.adapter,
                operation_id=operation.id,
                error=f"No adapter registered for '{operation.adapter}'",
            )

        context = ExecutionContext(operation=operation, timeout=timeout)

        # Validate
        try:
            is_valid, error_msg = adapter.validate(context)
        except Exception as e:
            return Receipt.failure(
                adapter=operation.adapter,
                operation_id=operation.id,
                error=f"Validation error: {e}",
            )
        if not is_valid:
            return Receipt.failure(
                adapter=operation.adapter,
                operation_id=operation.id,
                error=f"Validation failed: {error_msg}",
            )

        # Execute
        try:
            receipt = adapter.execute(context)
        except Exception as e:
            # Adapters return receipts; a raise here is a bug in the adapter.
            logger.error("Adapter %s raised during execution: %s", operation.adapter, e)
            receipt = Receipt.failure(
                adapter=operation.adapter,
                operation_id=operation.id,
                error=f"Unexpected error: {e}",
            )

        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)
        return receipt
