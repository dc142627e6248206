"""AI-assisted workflow helpers."""

from lawflow.ai.completion import AIResponseError, generate_json_completion
from lawflow.ai.workflows import (
    EfficiencyReport,
    NurturingSequence,
    WorkflowSuggestion,
    analyze_workflow_efficiency,
    generate_nurturing_sequence,
    suggest_workflow,
)

__all__ = [
    "AIResponseError",
    "EfficiencyReport",
    "NurturingSequence",
    "WorkflowSuggestion",
    "analyze_workflow_efficiency",
    "generate_json_completion",
    "generate_nurturing_sequence",
    "suggest_workflow",
]
