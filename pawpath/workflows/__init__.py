"""Workflow entry points for PawPath."""

from .plan_pipeline import EmptyPlanError, export_day_plan, run_plan_pipeline

__all__ = ["EmptyPlanError", "export_day_plan", "run_plan_pipeline"]
