"""
Node Package Loader

Dynamically loads workflow nodes from the node_packages directory.

A node package is a directory holding a manifest.json and a
backend/execute.py module. The module must define ``execute(context)``
and may define ``validate(config)``, ``poll(context)`` (polling
triggers) and ``webhook(context)`` (webhook triggers).
"""

import json
import importlib.util
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from onetap.workflows.engine.context import NodeContext
from onetap.workflows.engine.definitions import WorkflowItem
from onetap.workflows.engine.nodes.schema import NodeManifest

logger = logging.getLogger(__name__)


@dataclass
class NodePackage:
    """Represents a loaded node package"""
    id: str
    name: str
    version: str
    manifest: NodeManifest
    execute_fn: Callable
    validate_fn: Optional[Callable] = None
    poll_fn: Optional[Callable] = None
    webhook_fn: Optional[Callable] = None
    package_dir: Optional[Path] = None


class NodePackageLoader:
    """
    Loads and manages packaged workflow nodes from the filesystem.

    Usage:
        loader = NodePackageLoader(Path("node_packages"))
        loader.discover_nodes()
        items = await loader.execute_node("onetap.onetap", context)
    """

    def __init__(self, packages_dir: Path):
        self.packages_dir = Path(packages_dir)
        self.loaded_nodes: Dict[str, NodePackage] = {}

    def discover_nodes(self) -> List[NodePackage]:
        """
        Scan the packages directory (at any depth) and load every valid node package.

        Returns:
            List of successfully loaded NodePackage objects
        """
        nodes = []

        if not self.packages_dir.exists():
            logger.warning(f"Node packages directory {self.packages_dir} does not exist")
            return nodes

        for manifest_path in sorted(self.packages_dir.rglob("manifest.json")):
            package_dir = manifest_path.parent
            if any(part.startswith("_") for part in package_dir.relative_to(self.packages_dir).parts):
                continue

            try:
                node_package = self._load_node_package(package_dir)
            except (ValueError, ValidationError, ImportError, OSError) as e:
                logger.error(f"Failed to load node {package_dir.name}: {e}")
                continue

            nodes.append(node_package)
            self.loaded_nodes[node_package.id] = node_package
            logger.info(f"Loaded node: {node_package.name} v{node_package.version} ({node_package.id})")

        logger.info(f"Loaded {len(nodes)} workflow nodes")
        return nodes

    def _load_node_package(self, package_dir: Path) -> NodePackage:
        """
        Load a single node package from its directory.

        Raises:
            ValueError: If the execution module is missing or incomplete
            ValidationError: If manifest.json is invalid
        """
        with open(package_dir / "manifest.json", "r", encoding="utf-8") as f:
            manifest = NodeManifest.model_validate(json.load(f))

        execute_module_path = package_dir / "backend" / "execute.py"
        if not execute_module_path.exists():
            raise ValueError(f"Missing backend/execute.py in {package_dir.name}")

        spec = importlib.util.spec_from_file_location(
            f"node_packages.{manifest.id}.execute",
            execute_module_path
        )
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        if not hasattr(module, "execute"):
            raise ValueError(f"Node package {package_dir.name} missing execute() function")

        poll_fn = getattr(module, "poll", None)
        webhook_fn = getattr(module, "webhook", None)
        if manifest.polling and poll_fn is None:
            raise ValueError(f"Node package {package_dir.name} declares polling but has no poll()")
        if manifest.webhook and webhook_fn is None:
            raise ValueError(f"Node package {package_dir.name} declares webhook but has no webhook()")

        return NodePackage(
            id=manifest.id,
            name=manifest.name,
            version=manifest.version,
            manifest=manifest,
            execute_fn=module.execute,
            validate_fn=getattr(module, "validate", None),
            poll_fn=poll_fn,
            webhook_fn=webhook_fn,
            package_dir=package_dir,
        )

    def _require(self, node_id: str) -> NodePackage:
        node_package = self.loaded_nodes.get(node_id)
        if not node_package:
            raise ValueError(f"Node '{node_id}' not found. Available: {list(self.loaded_nodes.keys())}")
        return node_package

    async def execute_node(self, node_id: str, context: NodeContext) -> List[WorkflowItem]:
        """
        Execute a loaded node package.

        Raises:
            ValueError: If node not found or validation fails
        """
        node_package = self._require(node_id)

        if node_package.validate_fn:
            validation_result = await node_package.validate_fn(context.raw_config)
            if not validation_result.get("valid", True):
                errors = validation_result.get("errors", ["Validation failed"])
                raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

        return await node_package.execute_fn(context)

    async def poll_node(self, node_id: str, context: NodeContext) -> List[WorkflowItem]:
        """Run one polling cycle of a trigger node."""
        node_package = self._require(node_id)
        if not node_package.poll_fn:
            raise ValueError(f"Node '{node_id}' does not support polling")
        return await node_package.poll_fn(context)

    async def webhook_node(self, node_id: str, context: NodeContext) -> List[WorkflowItem]:
        """Hand an inbound webhook request to a trigger node."""
        node_package = self._require(node_id)
        if not node_package.webhook_fn:
            raise ValueError(f"Node '{node_id}' does not accept webhooks")
        return await node_package.webhook_fn(context)

    def get_node(self, node_id: str) -> Optional[NodePackage]:
        """Get a loaded node package by ID"""
        return self.loaded_nodes.get(node_id)

    def list_nodes(self) -> List[Dict[str, Any]]:
        """
        Get a list of all loaded node packages with their metadata.
        """
        return [
            {
                "id": node.id,
                "name": node.name,
                "version": node.version,
                "category": node.manifest.category.value,
                "description": node.manifest.description,
                "polling": node.manifest.polling,
                "webhook": node.manifest.webhook,
                "credentials": [c.name for c in node.manifest.credentials],
                "tags": node.manifest.tags,
            }
            for node in self.loaded_nodes.values()
        ]


# Global instance (initialized on first use)
_node_loader: Optional[NodePackageLoader] = None


def get_node_loader() -> NodePackageLoader:
    """Get the global node loader instance"""
    if _node_loader is None:
        raise RuntimeError("Node loader not initialized. Call initialize_node_loader() first.")
    return _node_loader


def initialize_node_loader(packages_dir: Path) -> NodePackageLoader:
    """Initialize the global node loader"""
    global _node_loader
    _node_loader = NodePackageLoader(packages_dir)
    _node_loader.discover_nodes()
    return _node_loader
