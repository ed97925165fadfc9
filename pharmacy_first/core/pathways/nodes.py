"""
Pathway Node Model

Closed set of node types that make up an authored decision tree:

    DecisionNode   – asks the clinician something and branches
    ActionNode     – terminal: advice / referral actions
    TreatmentNode  – terminal: a prescribing recommendation

Decision nodes hold one canonical Branch. Whatever encoding the author
used (yes/no, choices, options, child) is normalised into it at load
time. Branch targets are node ids that resolve through the document's
node arena; the tree itself carries no object references.

Every optional field is None when the author left it out. For treatment
nodes that distinction drives inheritance: only None fields are filled in.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


class NodeType(str, Enum):
    DECISION  = "decision"
    ACTION    = "action"
    TREATMENT = "treatment"


class BranchStyle(str, Enum):
    """
    Branch encodings in authoring precedence order.

    OPTIONS is the legacy spelling of CHOICES and behaves identically.
    """
    BINARY  = "binary"
    CHOICES = "choices"
    OPTIONS = "options"
    CHILD   = "child"


# ── Branches ──────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BinaryBranch:
    yes: str
    no: str

    style: ClassVar[BranchStyle] = BranchStyle.BINARY

    def targets(self) -> Tuple[str, ...]:
        return (self.yes, self.no)


@dataclass(frozen=True)
class Choice:
    label: str
    next: str


@dataclass(frozen=True)
class ChoiceBranch:
    choices: Tuple[Choice, ...]
    style: BranchStyle = BranchStyle.CHOICES

    def labels(self) -> List[str]:
        return [c.label for c in self.choices]

    def targets(self) -> Tuple[str, ...]:
        return tuple(c.next for c in self.choices)


@dataclass(frozen=True)
class ChildBranch:
    child: str

    style: ClassVar[BranchStyle] = BranchStyle.CHILD

    def targets(self) -> Tuple[str, ...]:
        return (self.child,)


Branch = Union[BinaryBranch, ChoiceBranch, ChildBranch]


# ── Nodes ─────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DecisionNode:
    id: str
    branch: Branch
    title: Optional[str] = None
    question: Optional[str] = None
    details: Any = None              # opaque authored content
    additional: Any = None           # opaque authored content

    type: ClassVar[NodeType] = NodeType.DECISION
    is_terminal: ClassVar[bool] = False

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "type": self.type.value}
        for key in ("title", "question", "details", "additional"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        data["branch_style"] = self.branch.style.value
        if isinstance(self.branch, BinaryBranch):
            data["yes"] = self.branch.yes
            data["no"] = self.branch.no
        elif isinstance(self.branch, ChoiceBranch):
            data["choices"] = [{"label": c.label, "next": c.next} for c in self.branch.choices]
        else:
            data["child"] = self.branch.child
        return data


@dataclass(frozen=True)
class ActionNode:
    id: str
    title: Optional[str] = None
    actions: Tuple[str, ...] = ()
    safety_net: bool = False

    type: ClassVar[NodeType] = NodeType.ACTION
    is_terminal: ClassVar[bool] = True

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "type": self.type.value}
        if self.title is not None:
            data["title"] = self.title
        data["actions"] = list(self.actions)
        data["safety_net"] = self.safety_net
        return data


@dataclass(frozen=True)
class TreatmentNode:
    """
    Prescribing recommendation.

    `dose` is drug-specific structured data and is passed through untouched.
    `inherits` names another treatment node whose fields act as defaults.
    """
    id: str
    title: Optional[str] = None
    drug: Optional[str] = None
    duration_days: Optional[int] = None
    dose: Any = None
    formulations: Optional[Tuple[str, ...]] = None
    route: Optional[str] = None
    legal_category: Optional[str] = None
    plus: Optional[Tuple[str, ...]] = None
    follow_up: Optional[str] = None
    safety_net: Optional[bool] = None
    referral_if_worsen: Optional[bool] = None
    inherits: Optional[str] = None

    type: ClassVar[NodeType] = NodeType.TREATMENT
    is_terminal: ClassVar[bool] = True

    def defined_fields(self) -> Dict[str, Any]:
        """Clinical fields the author set explicitly (identity excluded)."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name in INHERITABLE_FIELDS and getattr(self, f.name) is not None
        }

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"id": self.id, "type": self.type.value}
        for f in fields(self):
            if f.name == "id":
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            data[f.name] = list(value) if isinstance(value, tuple) else value
        return data


TreeNode = Union[DecisionNode, ActionNode, TreatmentNode]

# Fields a treatment node may take from the node it inherits from.
INHERITABLE_FIELDS = frozenset({
    "title",
    "drug",
    "duration_days",
    "dose",
    "formulations",
    "route",
    "legal_category",
    "plus",
    "follow_up",
    "safety_net",
    "referral_if_worsen",
})
