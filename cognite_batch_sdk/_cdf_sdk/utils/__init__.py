from .collection import chunker_sequence, flatten, humanize_collection
from .graph import Node, asset_chunker, chunk_by_dependency, enrich_with_parents, topological_sort
from .multi_item import MultiItemResult, all_at_once, each_in_sequence

__all__ = [
    "MultiItemResult",
    "Node",
    "all_at_once",
    "asset_chunker",
    "chunk_by_dependency",
    "chunker_sequence",
    "each_in_sequence",
    "enrich_with_parents",
    "flatten",
    "humanize_collection",
    "topological_sort",
]
