"""
Domain models — Pydantic types for rnclean.

All models are re-exported here for convenient access:

    from rnclean.core.models import Operation, Receipt, ExecutionResult, CleanupPlan
"""

from rnclean.core.models.config import CleanConfig, PackageManager
from rnclean.core.models.operation import Operation, Receipt
from rnclean.core.models.plan import CleanupPlan, PlanEntry
from rnclean.core.models.result import ExecutionResult

__all__ = [
    # config.py
    "CleanConfig",
    # plan.py
    "CleanupPlan",
    # result.py
    "ExecutionResult",
    # operation.py
    "Operation",
    "PackageManager",
    "PlanEntry",
    "Receipt",
]
