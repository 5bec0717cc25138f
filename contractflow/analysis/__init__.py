"""Analysis utilities for extracted contract flows."""

from contractflow.analysis.execution_preview import (
    flow_to_dict,
    format_preview,
    format_step,
)
from contractflow.analysis.flow_checks import check_flow_invariants

__all__ = [
    # execution_preview exports
    "flow_to_dict",
    "format_preview",
    "format_step",
    # flow_checks exports
    "check_flow_invariants",
]
