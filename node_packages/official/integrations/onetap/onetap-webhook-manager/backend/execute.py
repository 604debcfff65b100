"""
OneTap Webhook Manager Node

Registers, lists, updates and removes webhook integrations on the OneTap side.
"""
from typing import Any, Dict, List

from onetap.client import OneTapClient
from onetap.resources.integrations import OPERATIONS
from onetap.workflows.engine.context import NodeContext
from onetap.workflows.engine.definitions import WorkflowItem
from onetap.workflows.engine.executor import execute_per_item


async def execute(context: NodeContext) -> List[WorkflowItem]:
    operation = context.get_node_parameter("operation", 0, "register")
    environment = context.get_node_parameter("environment", 0, "production")

    handler = OPERATIONS.get(operation)
    if handler is None:
        raise ValueError(f"Unsupported webhook operation: {operation}")

    async with OneTapClient.from_context(context, environment) as client:
        async def run(index: int) -> List[Any]:
            return await handler(client, context.get_item_parameters(index), environment)

        return await execute_per_item(
            context,
            run,
            describe=lambda e: f"Failed to {operation} webhook with OneTap: {e}",
            error_json=lambda e: {"success": False, "operation": operation},
        )


async def validate(config: Dict[str, Any]) -> Dict[str, Any]:
    errors = []

    operation = config.get("operation", "register")
    if operation not in OPERATIONS:
        errors.append(f"Unsupported webhook operation: {operation}")
    if operation in ("register", "update") and not config.get("webhookUrl"):
        errors.append("Webhook URL is required")
    if operation in ("unregister", "update") and not config.get("integrationId"):
        errors.append("Integration ID is required")

    return {
        "valid": len(errors) == 0,
        "errors": errors
    }
