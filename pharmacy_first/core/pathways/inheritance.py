"""
Treatment Inheritance Resolver

A treatment node may declare `inherits: <node id>` to reuse another
treatment node's prescribing fields as defaults. Resolution is a single
step: the inheriting node takes the *declared* fields of the referenced
node, then its own declared fields win field by field. Arrays such as
`plus` are replaced wholesale, never merged.

Chains (A inherits B, B inherits C) are not followed transitively.
A only sees what B itself declares. Cycles and dangling references make
the document invalid.
"""
from __future__ import annotations

from dataclasses import replace
from typing import Dict, Mapping

from pharmacy_first.utils import MalformedPathwayError, get_logger
from .nodes import TreatmentNode, TreeNode

logger = get_logger(__name__)


def _inheritance_source(node: TreatmentNode, lookup: Mapping[str, TreeNode]) -> TreatmentNode:
    source = lookup.get(node.inherits)
    if source is None:
        raise MalformedPathwayError(
            f"Treatment node '{node.id}' inherits from unknown node '{node.inherits}'",
            node_id=node.id,
            details={"inherits": node.inherits},
        )
    if not isinstance(source, TreatmentNode):
        raise MalformedPathwayError(
            f"Treatment node '{node.id}' inherits from '{node.inherits}', "
            f"which is a {source.type.value} node",
            node_id=node.id,
            details={"inherits": node.inherits},
        )
    return source


def resolve_inheritance(node: TreatmentNode, lookup: Mapping[str, TreeNode]) -> TreatmentNode:
    """
    Return the effective node for `node`.

    Args:
        node: Raw treatment node as authored.
        lookup: Every raw node in the same document, keyed by id.

    Raises:
        MalformedPathwayError: the referenced node is missing or is not a
            treatment node.
    """
    if node.inherits is None:
        return node

    source = _inheritance_source(node, lookup)
    if source.inherits is not None:
        logger.warning(
            f"Treatment node '{node.id}' inherits from '{source.id}', which itself "
            f"inherits from '{source.inherits}'; only one level is resolved"
        )

    merged = {**source.defined_fields(), **node.defined_fields()}
    return replace(node, **merged)


def check_inheritance_cycles(lookup: Mapping[str, TreeNode]) -> None:
    """Raise MalformedPathwayError if any `inherits` chain loops back on itself."""
    cleared = set()
    for start in lookup.values():
        if not isinstance(start, TreatmentNode) or start.id in cleared:
            continue

        chain = []
        current = start
        while isinstance(current, TreatmentNode) and current.inherits is not None:
            if current.id in chain:
                loop = chain[chain.index(current.id):] + [current.id]
                raise MalformedPathwayError(
                    f"Inheritance cycle: {' -> '.join(loop)}",
                    node_id=current.id,
                    details={"cycle": loop},
                )
            if current.id in cleared:
                break
            chain.append(current.id)
            current = _inheritance_source(current, lookup)

        cleared.update(chain)
        cleared.add(start.id)


def resolve_all(lookup: Mapping[str, TreeNode]) -> Dict[str, TreeNode]:
    """
    Resolve every treatment node of a document in one pass.

    The result is a new arena in which each treatment node is already
    flattened; other nodes are carried over unchanged. Resolution always
    reads from the raw `lookup`, so the outcome does not depend on order.
    """
    check_inheritance_cycles(lookup)

    resolved: Dict[str, TreeNode] = {}
    for node_id, node in lookup.items():
        if isinstance(node, TreatmentNode):
            resolved[node_id] = resolve_inheritance(node, lookup)
        else:
            resolved[node_id] = node
    return resolved
