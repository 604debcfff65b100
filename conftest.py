"""
Shared fixtures: a scripted OneTap API behind httpx.MockTransport.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from onetap.workflows.engine.context import NodeContext
from onetap.workflows.engine.definitions import WorkflowItem

API_KEY = "otk_live_0123456789abcdef"


class MockOneTap:
    """
    Records every request and answers from per-route response queues.

    A queued response is a JSON-able value (sent with status 200), an
    ``httpx.Response``, or an exception to raise. The last response of a
    route is repeated once its queue runs dry.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[Any]] = {}

    def add(self, method: str, path: str, *responses: Any) -> "MockOneTap":
        self._routes.setdefault((method.upper(), path), []).extend(responses)
        return self

    def _handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self._routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"message": f"No route for {request.method} {request.url.path}"})

        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, json=response)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._handler))

    # --- inspection helpers ---

    def params(self, index: int = -1) -> Dict[str, str]:
        return dict(self.requests[index].url.params)

    def body(self, index: int = -1) -> Optional[Dict[str, Any]]:
        content = self.requests[index].content
        return json.loads(content) if content else None


@pytest.fixture
def onetap_api() -> MockOneTap:
    return MockOneTap()


@pytest.fixture
def credentials() -> Dict[str, Any]:
    return {"onetap": {"apiKey": API_KEY}}


@pytest.fixture
def make_context(onetap_api, credentials):
    """Build a NodeContext wired to the mock API."""

    def _make(config: Dict[str, Any], items: Optional[List[Dict[str, Any]]] = None, **kwargs) -> NodeContext:
        input_data = [WorkflowItem(json=item) for item in items] if items else None
        kwargs.setdefault("credentials", credentials)
        return NodeContext(
            node_id=kwargs.pop("node_id", "onetap-1"),
            config=config,
            input_data=input_data,
            http_client=onetap_api.client(),
            **kwargs,
        )

    return _make
