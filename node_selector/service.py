"""
FlowerEngine Node Service

Fetch-then-select operations bound to an account lookup collaborator.
"""

from typing import Optional
import structlog

from shared.models import (
    NodeListing,
    NodeMetadataDocument,
    NodeReport,
    NodeSelection,
    NoNodeReason,
)
from .metadata import AccountLookup, fetch_metadata
from .policies import (
    list_active_and_failing,
    select_best_available,
    select_best_overall,
)

logger = structlog.get_logger()

DEFAULT_ACCOUNT = "flowerengine"

# Warning event per empty selection outcome
NO_NODE_EVENTS = {
    NoNodeReason.NO_AVAILABLE_NODES: "no_available_nodes",
    NoNodeReason.NO_REPORT: "no_node_reports",
    NoNodeReason.NO_ENGINE_NODES: "no_engine_nodes",
}


class NodeService:
    """
    Node list operations for a Hive account.

    Every call fetches the document fresh; nothing is cached between calls.

    Usage:
        async with HiveAccountLookup() as lookup:
            service = NodeService(lookup)
            node = await service.get_best_node()
    """

    def __init__(self, lookup: AccountLookup):
        self.lookup = lookup

    async def fetch(self, account_name: str = DEFAULT_ACCOUNT) -> NodeMetadataDocument:
        """Fetch and validate the metadata document of an account."""
        document = await fetch_metadata(self.lookup, account_name)
        logger.debug(
            "metadata_fetched",
            account=account_name,
            nodes=len(document.nodes),
            failing=len(document.failing_nodes),
            reports=len(document.report or [])
        )
        return document

    async def list_active_and_failing_nodes(
        self,
        account_name: str = DEFAULT_ACCOUNT
    ) -> NodeListing:
        """Active nodes (listed and not failing) and failing nodes with reasons."""
        document = await self.fetch(account_name)
        return list_active_and_failing(document)

    async def get_full_node_report(
        self,
        account_name: str = DEFAULT_ACCOUNT
    ) -> list[NodeReport]:
        """Benchmark report rows, empty when the account publishes none."""
        document = await self.fetch(account_name)
        return list(document.report or [])

    async def get_best_available_node(
        self,
        account_name: str = DEFAULT_ACCOUNT
    ) -> NodeSelection:
        """Lowest latency healthy node that is not flagged as failing."""
        document = await self.fetch(account_name)
        selection = select_best_available(document)
        self._log_selection(account_name, "best_available", selection)
        return selection

    async def get_best_node(
        self,
        account_name: str = DEFAULT_ACCOUNT
    ) -> Optional[str]:
        """Engine node with the highest weighted score, or None."""
        document = await self.fetch(account_name)
        selection = select_best_overall(document)
        self._log_selection(account_name, "best_overall", selection)
        return selection.node

    def _log_selection(
        self,
        account_name: str,
        policy: str,
        selection: NodeSelection
    ) -> None:
        if selection.reason is not None:
            logger.warning(
                NO_NODE_EVENTS[selection.reason],
                account=account_name,
                policy=policy
            )
        elif selection.fallback:
            logger.warning(
                "fallback_to_first_available",
                account=account_name,
                node=selection.node
            )
        else:
            logger.debug(
                "node_selected",
                account=account_name,
                policy=policy,
                node=selection.node
            )
