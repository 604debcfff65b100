"""
Node Registry

Class-level facade over the node package loader, initialized lazily from
the node_packages directory.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from onetap.config import settings
from onetap.workflows.engine.context import NodeContext
from onetap.workflows.engine.definitions import WorkflowItem
from onetap.workflows.engine.nodes.loader import NodePackage, NodePackageLoader, initialize_node_loader

logger = logging.getLogger(__name__)


def default_packages_dir() -> Path:
    if settings.NODE_PACKAGES_DIR:
        return Path(settings.NODE_PACKAGES_DIR)
    # <root>/onetap/workflows/engine/nodes/registry.py -> <root>/node_packages
    return Path(__file__).resolve().parents[4] / "node_packages"


class NodeRegistry:
    """
    Central registry for all workflow nodes.
    """

    _loader: Optional[NodePackageLoader] = None
    _initialized: bool = False

    @classmethod
    def initialize(cls, packages_dir: Optional[Path] = None):
        """
        Initialize the node registry by discovering all node packages.

        Args:
            packages_dir: Path to node_packages directory (default: auto-detect)
        """
        if cls._initialized:
            logger.warning("NodeRegistry already initialized")
            return

        packages_dir = packages_dir or default_packages_dir()
        logger.info(f"Initializing NodeRegistry from: {packages_dir}")
        cls._loader = initialize_node_loader(packages_dir)
        cls._initialized = True
        logger.info(f"NodeRegistry initialized with {len(cls._loader.loaded_nodes)} nodes")

    @classmethod
    def reset(cls):
        """Forget loaded nodes; the next call re-discovers them."""
        cls._loader = None
        cls._initialized = False

    @classmethod
    def get_node(cls, node_id: str) -> Optional[NodePackage]:
        cls._ensure_initialized()
        return cls._loader.get_node(node_id)

    @classmethod
    def list_nodes(cls) -> Dict[str, Dict[str, Any]]:
        """
        List all available nodes with their metadata, keyed by node ID.
        """
        cls._ensure_initialized()
        return {node["id"]: node for node in cls._loader.list_nodes()}

    @classmethod
    async def execute_node(cls, node_id: str, context: NodeContext) -> List[WorkflowItem]:
        cls._ensure_initialized()
        return await cls._loader.execute_node(node_id, context)

    @classmethod
    async def poll_node(cls, node_id: str, context: NodeContext) -> List[WorkflowItem]:
        cls._ensure_initialized()
        return await cls._loader.poll_node(node_id, context)

    @classmethod
    async def webhook_node(cls, node_id: str, context: NodeContext) -> List[WorkflowItem]:
        cls._ensure_initialized()
        return await cls._loader.webhook_node(node_id, context)

    @classmethod
    def _ensure_initialized(cls):
        if not cls._initialized:
            cls.initialize()
