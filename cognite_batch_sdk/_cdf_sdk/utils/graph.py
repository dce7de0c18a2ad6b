import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from cognite_batch_sdk._cdf_sdk.constants import DEFAULT_CHUNK_SIZE
from cognite_batch_sdk._cdf_sdk.exceptions import CyclicDependencyError, DuplicatedExternalIdError

from .collection import chunker_sequence, humanize_collection

logger = logging.getLogger(__name__)

T_Record = TypeVar("T_Record")


@dataclass
class Node(Generic[T_Record]):
    """A record in a dependency graph.

    Nodes live in a list, and ``parent`` is the index of the parent node in
    that same list. ``None`` means the node has no parent within the batch.
    """

    data: T_Record
    parent: int | None = None


def get_external_id(record: Any) -> str | None:
    if isinstance(record, Mapping):
        return record.get("externalId")
    return getattr(record, "external_id", None)


def get_parent_external_id(record: Any) -> str | None:
    if isinstance(record, Mapping):
        return record.get("parentExternalId")
    return getattr(record, "parent_external_id", None)


def enrich_with_parents(
    records: Sequence[T_Record],
    external_id: Callable[[T_Record], str | None] = get_external_id,
    parent_external_id: Callable[[T_Record], str | None] = get_parent_external_id,
) -> list[Node[T_Record]]:
    """Wraps the records in nodes and links each node to its parent in the batch.

    A parent external id that does not belong to any record in the batch is
    assumed to already exist, and the node is treated as a root. Note that
    ``parentId`` always points outside the batch and is not an edge.

    Args:
        records: The records to wrap.
        external_id: Returns the external id of a record, if any.
        parent_external_id: Returns the parent external id of a record, if any.

    Returns:
        One node per record, in the same order as the records.

    Raises:
        DuplicatedExternalIdError: If two records share an external id.
    """
    nodes = [Node(data=record) for record in records]

    index_by_external_id: dict[str, int] = {}
    duplicated: dict[str, list[int]] = {}
    for no, node in enumerate(nodes):
        if not (xid := external_id(node.data)):
            continue
        if xid in index_by_external_id:
            duplicated.setdefault(xid, [index_by_external_id[xid]]).append(no)
        else:
            index_by_external_id[xid] = no
    if duplicated:
        raise DuplicatedExternalIdError(
            f"External ids must be unique within a batch. Duplicated: {humanize_collection(duplicated)}",
            duplicated,
        )

    for node in nodes:
        parent_xid = parent_external_id(node.data)
        if parent_xid and parent_xid in index_by_external_id:
            node.parent = index_by_external_id[parent_xid]
    return nodes


def topological_sort(
    nodes: Sequence[Node[T_Record]],
    external_id: Callable[[T_Record], str | None] = get_external_id,
) -> list[Node[T_Record]]:
    """Orders the nodes such that every node comes after its parent.

    The sort is stable: nodes are visited in their original order, and each
    node is emitted right after its ancestors that have not been emitted yet.

    Args:
        nodes: The nodes to sort, with ``parent`` indices into this sequence.
        external_id: Used to name the records in the error message on cycles.

    Returns:
        The nodes in topological order.

    Raises:
        CyclicDependencyError: If the parent links form a cycle.
    """
    emitted: set[int] = set()
    ordered: list[Node[T_Record]] = []
    for start in range(len(nodes)):
        chain: list[int] = []
        on_chain: set[int] = set()
        current: int | None = start
        while current is not None and current not in emitted:
            if current in on_chain:
                cycle_start = chain.index(current)
                cycle = [external_id(nodes[no].data) for no in (*chain[cycle_start:], current)]
                raise CyclicDependencyError(
                    f"Cycle in parent external ids: {' -> '.join(map(str, cycle))}",
                    cycle,
                )
            chain.append(current)
            on_chain.add(current)
            current = nodes[current].parent
        for no in reversed(chain):
            emitted.add(no)
            ordered.append(nodes[no])
    return ordered


def chunk_by_dependency(
    records: Sequence[T_Record],
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    external_id: Callable[[T_Record], str | None] = get_external_id,
    parent_external_id: Callable[[T_Record], str | None] = get_parent_external_id,
) -> list[list[T_Record]]:
    """Splits the records into chunks such that parents are never sent after their children.

    The records are sorted topologically on their parent external ids, and the
    sorted sequence is cut into consecutive chunks. A parent is therefore either
    in the same chunk as its child, before it, or in an earlier chunk.

    Args:
        records: The records to chunk. Mappings are read with the API keys
            ``externalId`` and ``parentExternalId``, other objects with the
            attributes ``external_id`` and ``parent_external_id``.
        chunk_size: The maximum number of records in each chunk.
        external_id: Returns the external id of a record, if any.
        parent_external_id: Returns the parent external id of a record, if any.

    Returns:
        The chunks. Only the last chunk may hold fewer than ``chunk_size`` records.

    Examples:
        >>> chunk_by_dependency(
        ...     [{"externalId": "child", "parentExternalId": "root"}, {"externalId": "root"}], chunk_size=1
        ... )
        [[{'externalId': 'root'}], [{'externalId': 'child', 'parentExternalId': 'root'}]]
    """
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be a positive integer, got {chunk_size}")
    nodes = enrich_with_parents(records, external_id, parent_external_id)
    ordered = [node.data for node in topological_sort(nodes, external_id)]
    chunks = list(chunker_sequence(ordered, chunk_size))
    logger.debug("Split %d records into %d chunks of at most %d", len(ordered), len(chunks), chunk_size)
    return chunks


# The name used by the asset endpoints.
asset_chunker = chunk_by_dependency
