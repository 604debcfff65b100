"""
OneTap Node

Runs one OneTap API operation (profiles, punch passes, participants, lists,
passports) for every input item.
"""
from typing import Any, Dict, List

from onetap.client import OneTapClient
from onetap.resources import OPERATIONS, get_handler
from onetap.workflows.engine.context import NodeContext
from onetap.workflows.engine.definitions import WorkflowItem
from onetap.workflows.engine.executor import execute_per_item


async def execute(context: NodeContext) -> List[WorkflowItem]:
    """
    Execute the selected resource operation once per input item.

    Args:
        context: NodeContext with resource/operation parameters and the OneTap credential

    Returns:
        One WorkflowItem per returned record, paired with its input item
    """
    resource = context.get_node_parameter("resource", 0, "profile")
    operation = context.get_node_parameter("operation", 0, "getAll")
    environment = context.get_node_parameter("environment", 0, "production")
    handler = get_handler(resource, operation)

    async with OneTapClient.from_context(context, environment) as client:
        async def run(index: int) -> List[Any]:
            return await handler(client, context.get_item_parameters(index))

        return await execute_per_item(
            context,
            run,
            describe=lambda e: f"Failed to execute {resource} operation from OneTap API: {e}",
        )


async def validate(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Validate configuration before execution.

    Returns:
        Dict with 'valid' (bool) and optional 'errors' (list)
    """
    errors = []

    resource = config.get("resource", "profile")
    operation = config.get("operation", "getAll")
    if (resource, operation) not in OPERATIONS:
        errors.append(f"The operation '{operation}' is not supported for resource '{resource}'")

    if config.get("environment", "production") not in ("production", "staging"):
        errors.append(f"Invalid environment: {config.get('environment')}")

    return {
        "valid": len(errors) == 0,
        "errors": errors
    }
