"""
CI/CD integration for leakskit.

This module talks to the GitHub Actions runner: step outputs, PATH
additions, annotations and log groups.
"""

from .workflow import WorkflowContext, is_github_actions

__all__ = ["WorkflowContext", "is_github_actions"]
