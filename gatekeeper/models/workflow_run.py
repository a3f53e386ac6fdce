"""Workflow run model."""

from pydantic import BaseModel


class WorkflowRun(BaseModel):
    """One invocation of a workflow, linked to check runs by its check suite."""

    name: str
    check_suite_id: int
