import time
from typing import Any, Callable, Dict, List, Optional

import httpx

from onetap.workflows.engine.definitions import WorkflowItem
from onetap.workflows.engine.expressions.resolver import ExpressionResolver

_MISSING = object()


class NodeContext:
    """
    Execution context for a node.

    Carries the node's raw parameters, the incoming items, credentials and
    node settings, and resolves parameter expressions against a given input
    item. The host may hand in an ``http_client`` to route outbound calls
    through its own transport, and a ``webhook_request`` when the node is
    invoked from the inbound webhook endpoint.
    """

    def __init__(
        self,
        node_id: str,
        config: Dict[str, Any],
        input_data: Optional[List[WorkflowItem]] = None,
        credentials: Optional[Dict[str, Any]] = None,
        settings: Optional[Dict[str, Any]] = None,
        execution_id: str = "",
        workflow_id: str = "",
        env: Optional[Dict[str, str]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        webhook_request: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.execution_id = execution_id
        self.workflow_id = workflow_id
        self.node_id = node_id
        self.raw_config = config or {}
        self.input_data = input_data or []
        self.credentials = credentials or {}
        self.settings = settings or {}
        self.env = env or {}
        self.http_client = http_client
        self.webhook_request = webhook_request
        self.clock = clock

    @property
    def items(self) -> List[WorkflowItem]:
        """Input items; a single empty item when the node has no input (start node)."""
        return self.input_data or [WorkflowItem(json={})]

    @property
    def continue_on_fail(self) -> bool:
        if self.settings.get("continueOnFail"):
            return True
        return self.settings.get("on_error") == "continue"

    def now(self) -> int:
        """Current wall-clock time in epoch seconds."""
        return int(self.clock())

    def _resolver_for(self, item_index: int) -> ExpressionResolver:
        items = self.items
        item = items[item_index] if 0 <= item_index < len(items) else WorkflowItem(json={})
        return ExpressionResolver({
            "json": item.json_data,
            "item_index": item_index,
            "env": self.env,
            "execution": {
                "id": self.execution_id,
                "workflow_id": self.workflow_id,
            },
        })

    def get_node_parameter(self, name: str, item_index: int = 0, default: Any = _MISSING) -> Any:
        """
        Return parameter ``name`` with expressions resolved against item ``item_index``.

        Raises:
            ValueError: If the parameter is not set and no default is given
        """
        if name not in self.raw_config:
            if default is _MISSING:
                raise ValueError(f"Could not get parameter '{name}'")
            return default
        return self._resolver_for(item_index).resolve(self.raw_config[name])

    def get_item_parameters(self, item_index: int = 0) -> Dict[str, Any]:
        """All parameters resolved against item ``item_index``."""
        return self._resolver_for(item_index).resolve(self.raw_config)

    def resolve_config(self) -> Dict[str, Any]:
        """
        Returns the configuration dictionary resolved against the first item.
        """
        return self.get_item_parameters(0)
