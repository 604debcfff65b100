import json
import logging
import uuid
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from onetap.workflows.engine.context import NodeContext
from onetap.workflows.engine.nodes.registry import NodeRegistry

logger = logging.getLogger(__name__)

router = APIRouter()

# node_id -> parameters of the active trigger node
_webhook_configs: Dict[str, Dict[str, Any]] = {}


class WebhookReceivedResponse(BaseModel):
    received: bool = True
    triggered: bool
    items: List[Dict[str, Any]] = []


def register_webhook_config(node_id: str, config: Dict[str, Any]) -> None:
    """Set the node parameters used when ``node_id`` receives a webhook."""
    _webhook_configs[node_id] = dict(config)


def unregister_webhook_config(node_id: str) -> None:
    _webhook_configs.pop(node_id, None)


def get_webhook_config(node_id: str) -> Optional[Dict[str, Any]]:
    return _webhook_configs.get(node_id)


async def _read_body(request: Request) -> Any:
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return raw.decode("utf-8", errors="replace")


@router.post("/{node_id}", response_model=WebhookReceivedResponse)
async def receive_webhook(node_id: str, request: Request) -> WebhookReceivedResponse:
    """
    Hand an inbound OneTap webhook to a trigger node.

    Payloads the node filters out are acknowledged with ``triggered: false``.
    """
    node = NodeRegistry.get_node(node_id)
    if not node:
        raise HTTPException(status_code=404, detail=f"Node '{node_id}' not found")
    if not node.webhook_fn:
        raise HTTPException(status_code=400, detail=f"Node '{node_id}' does not accept webhooks")

    webhook_request = {
        "body": await _read_body(request),
        "headers": dict(request.headers),
        "query": dict(request.query_params),
        "method": request.method,
    }

    context = NodeContext(
        node_id=node_id,
        config=get_webhook_config(node_id) or {},
        execution_id=str(uuid.uuid4()),
        webhook_request=webhook_request,
    )

    try:
        items = await NodeRegistry.webhook_node(node_id, context)
    except ValueError as e:
        logger.warning(f"Webhook for {node_id} rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    logger.info(f"Webhook for {node_id} produced {len(items)} items")
    return WebhookReceivedResponse(
        triggered=bool(items),
        items=[item.json_data for item in items],
    )
