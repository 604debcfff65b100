"""
OneTap Trigger Node

Starts a workflow on OneTap check-ins, check-outs, new participants or new
profiles, either by polling the API or from an inbound webhook.
"""
import logging
from typing import List

from onetap.client import OneTapClient
from onetap.events import TriggerConfig, poll_events, webhook_event
from onetap.workflows.engine.context import NodeContext
from onetap.workflows.engine.definitions import WorkflowItem

logger = logging.getLogger(__name__)


async def poll(context: NodeContext) -> List[WorkflowItem]:
    """
    Run one polling cycle.

    Any failure yields no events for this cycle instead of failing the run.
    """
    try:
        config = TriggerConfig.model_validate(context.resolve_config())
        async with OneTapClient.from_context(context, config.environment) as client:
            events = await poll_events(client, config, context.now())
    except Exception as e:
        logger.warning(f"OneTap poll for node {context.node_id} failed, no events this cycle: {e}")
        return []

    return [WorkflowItem(json=event) for event in events]


async def webhook(context: NodeContext) -> List[WorkflowItem]:
    """Turn the inbound webhook request into at most one trigger event."""
    config = TriggerConfig.model_validate(context.resolve_config())
    request = context.webhook_request or {}

    event = webhook_event(
        config,
        request.get("body"),
        headers=request.get("headers"),
        query=request.get("query"),
        now=context.now(),
    )
    if event is None:
        logger.info(f"Webhook for node {context.node_id} did not match the trigger filters")
        return []
    return [WorkflowItem(json=event)]


async def execute(context: NodeContext) -> List[WorkflowItem]:
    """Manual run: poll in polling mode, replay the webhook request in webhook mode."""
    config = TriggerConfig.model_validate(context.resolve_config())
    if config.triggerMethod == "webhook":
        return await webhook(context)
    return await poll(context)
