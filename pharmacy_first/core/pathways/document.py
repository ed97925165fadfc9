"""
Pathway Document Model & Loader

Turns an authored pathway JSON object into an immutable PathwayDocument.

Loading is a validating pre-pass:
    1. Walk the decision tree, checking shape and normalising each decision
       node's branch encoding (yes/no > choices > options > child).
    2. Collect every node into an arena keyed by node id (ids are unique).
    3. Flatten treatment inheritance once, so traversal only ever sees
       fully resolved nodes.

Field types (document, metadata and per-node) are checked by the strict
models in authored.py.

Anything that violates the document invariants raises MalformedPathwayError
naming the offending node; nothing is coerced.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pharmacy_first.utils import MalformedPathwayError, get_logger
from .authored import (
    AuthoredActionFields,
    AuthoredDecisionFields,
    AuthoredDocument,
    AuthoredMetadata,
    AuthoredSelfCare,
    AuthoredTreatmentFields,
    validate_authored,
)
from .inheritance import resolve_all
from .nodes import (
    ActionNode,
    BinaryBranch,
    Branch,
    BranchStyle,
    ChildBranch,
    Choice,
    ChoiceBranch,
    DecisionNode,
    NodeType,
    TreatmentNode,
    TreeNode,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class PathwayMetadata:
    version: str
    last_updated: str
    sources: Tuple[str, ...]
    nice_guideline: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "last_updated": self.last_updated,
            "sources": list(self.sources),
            "nice_guideline": self.nice_guideline,
        }


@dataclass(frozen=True)
class SelfCareAndSafetyNetting:
    self_care: Tuple[str, ...] = ()
    education: Tuple[str, ...] = ()
    safety_net: Tuple[str, ...] = ()
    referral: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, List[str]]:
        return {
            "self_care": list(self.self_care),
            "education": list(self.education),
            "safety_net": list(self.safety_net),
            "referral": list(self.referral),
        }


@dataclass(frozen=True)
class PathwayDocument:
    """
    One loaded pathway. Read-only; safe to share between sessions.

    `nodes` is the arena of resolved nodes keyed by id.
    """
    pathway: str
    metadata: PathwayMetadata
    notes: Tuple[str, ...]
    root_id: str
    nodes: Mapping[str, TreeNode]
    pgds: Optional[Mapping[str, Any]] = None
    self_care_and_safety_netting: Optional[SelfCareAndSafetyNetting] = None
    extras: Mapping[str, Any] = field(default_factory=dict)

    @property
    def root(self) -> TreeNode:
        return self.nodes[self.root_id]

    def node(self, node_id: str) -> TreeNode:
        return self.nodes[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def summary(self) -> Dict[str, Any]:
        """JSON-compatible view of everything except the node arena."""
        return {
            "pathway": self.pathway,
            "metadata": self.metadata.to_dict(),
            "notes": list(self.notes),
            "root": self.root.to_dict(),
            "node_count": len(self.nodes),
            "pgds": dict(self.pgds) if self.pgds is not None else None,
            "self_care_and_safety_netting": (
                self.self_care_and_safety_netting.to_dict()
                if self.self_care_and_safety_netting is not None else None
            ),
        }


# ── Field helpers ─────────────────────────────────────────────────────────────

def _fail(message: str, node_id: Optional[str] = None, **details) -> MalformedPathwayError:
    return MalformedPathwayError(message, node_id=node_id, details=details or None)


def _present(raw: Mapping[str, Any], key: str) -> bool:
    return raw.get(key) is not None


def _tuple(values: Optional[List[str]]) -> Optional[Tuple[str, ...]]:
    return tuple(values) if values is not None else None


# ── Tree parsing ──────────────────────────────────────────────────────────────

class _TreeParser:
    """Single-use parser that fills a raw node arena while walking the tree."""

    def __init__(self):
        self.arena: Dict[str, TreeNode] = {}

    def parse(self, raw: Any, parent_id: Optional[str] = None) -> str:
        if not isinstance(raw, Mapping):
            raise _fail("Tree node must be an object", parent_id)

        node_id = raw.get("id")
        if not isinstance(node_id, str) or not node_id:
            raise _fail("Tree node is missing a string 'id'", parent_id)
        if node_id in self.arena:
            raise _fail(f"Duplicate node id '{node_id}'", node_id)

        try:
            node_type = NodeType(raw.get("type"))
        except ValueError:
            raise _fail(f"Unknown node type {raw.get('type')!r}", node_id, type=raw.get("type")) from None

        # Reserve the id before descending so duplicates below are caught.
        self.arena[node_id] = None  # type: ignore[assignment]

        if node_type is NodeType.DECISION:
            node: TreeNode = self._decision(raw, node_id)
        elif node_type is NodeType.ACTION:
            node = self._action(raw, node_id)
        else:
            node = self._treatment(raw, node_id)

        self.arena[node_id] = node
        return node_id

    def _branch(self, raw: Mapping[str, Any], node_id: str) -> Branch:
        present = [
            style for style, keys in (
                (BranchStyle.BINARY, ("yes", "no")),
                (BranchStyle.CHOICES, ("choices",)),
                (BranchStyle.OPTIONS, ("options",)),
                (BranchStyle.CHILD, ("child",)),
            )
            if any(_present(raw, k) for k in keys)
        ]
        if not present:
            raise _fail(f"Decision node '{node_id}' declares no branches", node_id)

        style = present[0]
        if len(present) > 1:
            logger.warning(
                f"Decision node '{node_id}' declares {[s.value for s in present]}; "
                f"using '{style.value}'"
            )

        if style is BranchStyle.BINARY:
            if not (_present(raw, "yes") and _present(raw, "no")):
                raise _fail(f"Decision node '{node_id}' must declare both 'yes' and 'no'", node_id)
            return BinaryBranch(
                yes=self.parse(raw["yes"], node_id),
                no=self.parse(raw["no"], node_id),
            )

        if style is BranchStyle.CHILD:
            return ChildBranch(child=self.parse(raw["child"], node_id))

        key = style.value
        entries = raw[key]
        if not isinstance(entries, list) or not entries:
            raise _fail(f"'{key}' on decision node '{node_id}' must be a non-empty list", node_id)

        choices = []
        seen_labels = set()
        for position, entry in enumerate(entries):
            if not isinstance(entry, Mapping) or not isinstance(entry.get("label"), str):
                raise _fail(f"{key}[{position}] on '{node_id}' needs a string 'label'", node_id)
            label = entry["label"]
            if label in seen_labels:
                raise _fail(f"Duplicate {key} label {label!r} on '{node_id}'", node_id)
            if "next" not in entry:
                raise _fail(f"{key}[{position}] on '{node_id}' has no 'next' node", node_id)
            seen_labels.add(label)
            choices.append(Choice(label=label, next=self.parse(entry["next"], node_id)))
        return ChoiceBranch(choices=tuple(choices), style=style)

    def _decision(self, raw: Mapping[str, Any], node_id: str) -> DecisionNode:
        fields = validate_authored(AuthoredDecisionFields, raw, node_id)
        return DecisionNode(
            id=node_id,
            branch=self._branch(raw, node_id),
            title=fields.title,
            question=fields.question,
            details=fields.details,
            additional=fields.additional,
        )

    def _action(self, raw: Mapping[str, Any], node_id: str) -> ActionNode:
        fields = validate_authored(AuthoredActionFields, raw, node_id)
        return ActionNode(
            id=node_id,
            title=fields.title,
            actions=_tuple(fields.actions) or (),
            safety_net=bool(fields.safety_net),
        )

    def _treatment(self, raw: Mapping[str, Any], node_id: str) -> TreatmentNode:
        fields = validate_authored(AuthoredTreatmentFields, raw, node_id)
        return TreatmentNode(
            id=node_id,
            title=fields.title,
            drug=fields.drug,
            duration_days=fields.duration_days,
            dose=fields.dose,
            formulations=_tuple(fields.formulations),
            route=fields.route,
            legal_category=fields.legal_category,
            plus=_tuple(fields.plus),
            follow_up=fields.follow_up,
            safety_net=fields.safety_net,
            referral_if_worsen=fields.referral_if_worsen,
            inherits=fields.inherits,
        )


# ── Document parsing ──────────────────────────────────────────────────────────

def _metadata(authored: AuthoredMetadata) -> PathwayMetadata:
    return PathwayMetadata(
        version=authored.version,
        last_updated=authored.last_updated,
        sources=tuple(authored.sources),
        nice_guideline=authored.nice_guideline,
    )


def _self_care(authored: Optional[AuthoredSelfCare]) -> Optional[SelfCareAndSafetyNetting]:
    if authored is None:
        return None
    return SelfCareAndSafetyNetting(
        self_care=_tuple(authored.self_care) or (),
        education=_tuple(authored.education) or (),
        safety_net=_tuple(authored.safety_net) or (),
        referral=_tuple(authored.referral) or (),
    )


def load_pathway_document(data: Mapping[str, Any]) -> PathwayDocument:
    """
    Validate an already-parsed pathway JSON object and build the document.

    Raises:
        MalformedPathwayError: on any shape or invariant violation.
    """
    if not isinstance(data, Mapping):
        raise _fail("Pathway document must be a JSON object")

    authored = validate_authored(AuthoredDocument, dict(data))
    metadata = _metadata(authored.metadata)

    parser = _TreeParser()
    root_id = parser.parse(authored.decision_tree)
    arena = resolve_all(parser.arena)

    document = PathwayDocument(
        pathway=authored.pathway,
        metadata=metadata,
        notes=tuple(authored.notes),
        root_id=root_id,
        nodes=MappingProxyType(arena),
        pgds=MappingProxyType(authored.pgds) if authored.pgds is not None else None,
        self_care_and_safety_netting=_self_care(authored.self_care_and_safety_netting),
        extras=MappingProxyType(dict(authored.model_extra or {})),
    )
    logger.info(
        f"Loaded pathway '{document.pathway}' v{metadata.version}: "
        f"{len(arena)} nodes, root '{root_id}'"
    )
    return document


def load_pathway_file(path: Union[str, Path]) -> PathwayDocument:
    """Read a pathway JSON file from disk and load it."""
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
    except json.JSONDecodeError as exc:
        raise MalformedPathwayError(
            f"{path.name} is not valid JSON: {exc}",
            details={"file": str(path)},
        ) from exc

    try:
        return load_pathway_document(data)
    except MalformedPathwayError as exc:
        logger.error(f"Rejected pathway file {path.name}: {exc.message} (node={exc.node_id})")
        raise
