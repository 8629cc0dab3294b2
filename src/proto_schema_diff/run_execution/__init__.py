"""Run execution domain exports."""

from .comparison_run_use_case import (
    RunExecutionError,
    execute_schema_comparison_run,
    request_from_configuration,
)
from .run_contracts import ComparisonRequest, RunOutcome

__all__ = [
    "ComparisonRequest",
    "RunOutcome",
    "RunExecutionError",
    "execute_schema_comparison_run",
    "request_from_configuration",
]
