"""
Projection engine — deterministic monthly compounding, portfolio aggregation, and the runner.
"""

from .compounding import project
from .projector import project_pockets, project_portfolio
from .runner import ProjectionResult, run_projection

__all__ = [
    "project",
    "project_pockets",
    "project_portfolio",
    "ProjectionResult",
    "run_projection",
]
