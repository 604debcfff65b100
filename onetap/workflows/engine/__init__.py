"""
Execution harness used by the OneTap node packages.

Provides the item model, per-node context, per-item executor, error types
and the node package loader.
"""

from .context import NodeContext
from .definitions import WorkflowItem
from .error_handler import NodeOperationError
from .executor import execute_per_item

__all__ = ["NodeContext", "WorkflowItem", "NodeOperationError", "execute_per_item"]
