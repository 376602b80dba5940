"""Least-privilege grants from declared intents.

Each storage kind owns an ActionTable mapping read/write/delete to provider
actions. A consumer's grant is the set union of the rows its intents select. A
consumer whose rows select no action, including one with no intents, gets
no grant at all.
"""

from __future__ import annotations

from stackcomp.core.config import ResolverConfig
from stackcomp.core.errors import UnknownIntent, UnknownStorageKind
from stackcomp.core.model import INTENTS, AccessGrant, ActionTable, Storage
from stackcomp.core.result import Err, Ok, Result

__all__ = [
    "BUCKET_ACTIONS",
    "BUILTIN_TABLES",
    "KV_ACTIONS",
    "action_table_for",
    "synthesize",
]

BUCKET_ACTIONS = ActionTable(
    kind="bucket",
    read=("s3:GetObject", "s3:ListBucket"),
    write=("s3:PutObject",),
    delete=("s3:DeleteObject",),
)

KV_ACTIONS = ActionTable(
    kind="kv",
    read=("dynamodb:GetItem", "dynamodb:Query", "dynamodb:Scan", "dynamodb:DescribeTable"),
    write=("dynamodb:PutItem", "dynamodb:UpdateItem", "dynamodb:BatchWriteItem"),
    delete=("dynamodb:DeleteItem",),
)

BUILTIN_TABLES: dict[str, ActionTable] = {t.kind: t for t in (BUCKET_ACTIONS, KV_ACTIONS)}


def action_table_for(
    storage: Storage,
    config: ResolverConfig | None = None,
) -> Result[ActionTable, UnknownStorageKind]:
    """Pick the action table for a storage resource; config tables win."""
    tables = dict(BUILTIN_TABLES)
    if config is not None:
        tables.update(config.permissions)

    table = tables.get(storage.kind)
    if table is None:
        return Err(
            UnknownStorageKind(
                kind=storage.kind,
                resource=storage.name,
                available=tuple(sorted(tables)),
            )
        )
    return Ok(table)


def synthesize(
    storage: Storage,
    resource_id: str,
    table: ActionTable,
) -> Result[tuple[AccessGrant, ...], UnknownIntent]:
    """Emit one grant per consumer of `storage` that declared any intent.

    Args:
        storage: The storage resource and its consumers.
        resource_id: Physical id of the storage resource.
        table: Action table for the storage kind.

    Returns:
        Grants in consumer declaration order, or the first unknown intent.
    """
    grants: list[AccessGrant] = []

    for consumer in storage.consumers:
        actions: set[str] = set()
        for intent in sorted(consumer.intents):
            selected = table.actions_for(intent) if intent in INTENTS else None
            if selected is None:
                return Err(
                    UnknownIntent(intent=intent, resource=storage.name, consumer=consumer.name)
                )
            actions.update(selected)

        if not actions:
            continue

        grants.append(
            AccessGrant(
                resource_ref=storage.name,
                consumer_ref=consumer.name,
                identity=consumer.identity,
                resource_id=resource_id,
                actions=frozenset(actions),
            )
        )

    return Ok(tuple(grants))
