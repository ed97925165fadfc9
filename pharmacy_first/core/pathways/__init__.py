"""
Clinical Pathways

Authored decision trees for named conditions: node model, treatment
inheritance, document loading and answer-driven traversal.

Usage:
    from pharmacy_first.core.pathways import load_pathway_file, walk

    document = load_pathway_file("data/pathways/acute_otitis_media.json")
    cursor = walk(document, ["no", "Otorrhoea following perforation", "no"])
    print(cursor.current.to_dict())
"""
from .nodes import (
    ActionNode,
    BinaryBranch,
    BranchStyle,
    ChildBranch,
    Choice,
    ChoiceBranch,
    DecisionNode,
    NodeType,
    TreatmentNode,
    TreeNode,
)
from .inheritance import check_inheritance_cycles, resolve_all, resolve_inheritance
from .document import (
    PathwayDocument,
    PathwayMetadata,
    SelfCareAndSafetyNetting,
    load_pathway_document,
    load_pathway_file,
)
from .history import PatientHistory, Severity
from .traversal import TraversalCursor, advance, available_answers, select_branch, walk
from .registry import (
    PathwayDefinition,
    PathwayRegistry,
    get_pathway_definition,
    list_definitions,
)

__all__ = [
    "ActionNode",
    "BinaryBranch",
    "BranchStyle",
    "ChildBranch",
    "Choice",
    "ChoiceBranch",
    "DecisionNode",
    "NodeType",
    "TreatmentNode",
    "TreeNode",
    "check_inheritance_cycles",
    "resolve_all",
    "resolve_inheritance",
    "PathwayDocument",
    "PathwayMetadata",
    "SelfCareAndSafetyNetting",
    "load_pathway_document",
    "load_pathway_file",
    "PatientHistory",
    "Severity",
    "TraversalCursor",
    "advance",
    "available_answers",
    "select_branch",
    "walk",
    "PathwayDefinition",
    "PathwayRegistry",
    "get_pathway_definition",
    "list_definitions",
]
