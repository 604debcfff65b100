import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional

from onetap.workflows.engine.context import NodeContext
from onetap.workflows.engine.definitions import WorkflowItem
from onetap.workflows.engine.error_handler import ErrorClassifier, NodeOperationError

logger = logging.getLogger(__name__)

ItemOperation = Callable[[int], Awaitable[List[Dict[str, Any]]]]


async def execute_per_item(
    context: NodeContext,
    operation: ItemOperation,
    *,
    describe: Callable[[Exception], str],
    error_json: Optional[Callable[[Exception], Dict[str, Any]]] = None,
) -> List[WorkflowItem]:
    """
    Run ``operation`` once per input item, strictly in order.

    Each record returned for item ``i`` becomes one output item paired with
    ``i``. When an item fails and the node continues on fail, an error item
    takes its place and the loop moves on; otherwise the failure is raised
    as ``NodeOperationError`` carrying the item index and the rest of the
    batch is skipped.

    Args:
        context: Node execution context
        operation: Coroutine function taking the item index, returning records
        describe: Builds the user-facing description of a failure
        error_json: Extra fields merged into error items

    Returns:
        Output items in input order
    """
    results: List[WorkflowItem] = []

    for index, item in enumerate(context.items):
        try:
            records = await operation(index)
        except Exception as e:
            error_context = ErrorClassifier.classify(e)

            if context.continue_on_fail:
                logger.warning(
                    f"Node {context.node_id} item {index} failed ({error_context.category.value}): {e}"
                )
                payload = {"error": str(e)}
                if error_json:
                    payload = {**error_json(e), **payload}
                results.append(WorkflowItem(
                    json=payload,
                    binary=item.binary_data,
                    pairedItem=index,
                    error=str(e),
                ))
                continue

            logger.error(
                f"Node {context.node_id} item {index} failed ({error_context.category.value}): {e} - {error_context.suggestion}"
            )
            if isinstance(e, NodeOperationError):
                e.item_index = index
                raise
            raise NodeOperationError(
                context.node_id,
                str(e),
                item_index=index,
                description=describe(e),
                cause=e,
            ) from e

        for record in records:
            # Items must carry an object; scalars and nested arrays are wrapped
            json_data = record if isinstance(record, dict) else {"data": record}
            results.append(WorkflowItem(json=json_data, pairedItem=index))

    return results
