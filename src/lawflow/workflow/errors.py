"""Workflow engine error taxonomy.

Only `NotFoundError` aborts a run. `ActionError` is raised by the dispatcher
and converted into a failed step outcome by the executor.
"""

from __future__ import annotations


class WorkflowError(Exception):
    pass


class NotFoundError(WorkflowError):
    """The workflow does not exist or belongs to another tenant.

    Both cases read the same to the caller so that workflow ids cannot be
    probed across tenants.
    """

    def __init__(self, workflow_id: str, tenant_id: str) -> None:
        super().__init__("Workflow not found or access denied")
        self.workflow_id = workflow_id
        self.tenant_id = tenant_id


class ActionError(WorkflowError):
    """A collaborator call behind a step's action failed."""

    def __init__(self, message: str, *, action: str, step_id: str) -> None:
        super().__init__(message)
        self.action = action
        self.step_id = step_id
