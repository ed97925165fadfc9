"""
Pathway Traversal Engine

Walks a loaded PathwayDocument one clinician answer at a time until an
action or treatment node is reached.

Branch selection is driven only by the explicit answer:

    yes/no          bool, "yes"/"no"/"y"/"n"/"true"/"false", 1/0
    choices/options exact label, or 0-based index into the list
    child           answer ignored, always continues

Usage:
    from pharmacy_first.core.pathways import TraversalCursor

    cursor = TraversalCursor(document)
    cursor.answer("no")
    cursor.answer("Otorrhoea following perforation")
    cursor.answer(False)
    if cursor.is_terminal:
        print(cursor.current.to_dict(), cursor.path)
"""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from pharmacy_first.utils import (
    InvalidTraversalError,
    TraversalTerminatedError,
    UnmatchedAnswerError,
    get_logger,
)
from .document import PathwayDocument
from .history import PatientHistory
from .nodes import BinaryBranch, ChildBranch, ChoiceBranch, DecisionNode, TreeNode

logger = get_logger(__name__)

Answer = Union[bool, int, str, None]

_YES = frozenset({"yes", "y", "true", "1"})
_NO = frozenset({"no", "n", "false", "0"})


def _as_bool(node: DecisionNode, answer: Answer) -> bool:
    if isinstance(answer, bool):
        return answer
    if isinstance(answer, int) and answer in (0, 1):
        return bool(answer)
    if isinstance(answer, str):
        token = answer.strip().lower()
        if token in _YES:
            return True
        if token in _NO:
            return False
    raise UnmatchedAnswerError(
        f"Node '{node.id}' expects a yes/no answer, got {answer!r}",
        node_id=node.id,
        answer=answer,
        details={"expected": ["yes", "no"]},
    )


def _pick_choice(node: DecisionNode, branch: ChoiceBranch, answer: Answer) -> str:
    if isinstance(answer, int) and not isinstance(answer, bool):
        if 0 <= answer < len(branch.choices):
            return branch.choices[answer].next
    elif isinstance(answer, str):
        for choice in branch.choices:
            if choice.label == answer:
                return choice.next

    raise UnmatchedAnswerError(
        f"Answer {answer!r} matches none of the {branch.style.value} on node '{node.id}'",
        node_id=node.id,
        answer=answer,
        details={"expected": branch.labels()},
    )


def select_branch(node: DecisionNode, answer: Answer) -> str:
    """Id of the node the answer leads to."""
    branch = node.branch
    if isinstance(branch, BinaryBranch):
        return branch.yes if _as_bool(node, answer) else branch.no
    if isinstance(branch, ChoiceBranch):
        return _pick_choice(node, branch, answer)
    if isinstance(branch, ChildBranch):
        return branch.child
    raise InvalidTraversalError(f"Node '{node.id}' has an unknown branch type", node_id=node.id)


def advance(document: PathwayDocument, node: TreeNode, answer: Answer = None) -> TreeNode:
    """
    One traversal step.

    Raises:
        TraversalTerminatedError: `node` is an action or treatment node.
        UnmatchedAnswerError: `answer` selects no branch of `node`.
    """
    if node.is_terminal:
        raise TraversalTerminatedError(node.id)
    return document.node(select_branch(node, answer))


def available_answers(node: TreeNode) -> List[str]:
    """Answers to offer the clinician at `node` (empty for child/terminal nodes)."""
    if node.is_terminal:
        return []
    branch = node.branch
    if isinstance(branch, BinaryBranch):
        return ["yes", "no"]
    if isinstance(branch, ChoiceBranch):
        return branch.labels()
    return []


class TraversalCursor:
    """
    Per-consultation position in a pathway.

    Holds the only mutable state of a session: the visited path and the
    answers given. The document itself is shared and never modified.
    A failed step leaves the cursor exactly as it was.
    """

    def __init__(self, document: PathwayDocument, history: Optional[PatientHistory] = None):
        self.document = document
        self.history = history
        self._path: List[str] = [document.root_id]
        self._answers: List[Answer] = []

    @property
    def current(self) -> TreeNode:
        return self.document.node(self._path[-1])

    @property
    def path(self) -> Tuple[str, ...]:
        return tuple(self._path)

    @property
    def answers(self) -> Tuple[Answer, ...]:
        return tuple(self._answers)

    @property
    def is_terminal(self) -> bool:
        return self.current.is_terminal

    def answer(self, value: Answer = None) -> TreeNode:
        """Advance from the current node; returns the new current node."""
        current = self.current
        try:
            nxt = advance(self.document, current, value)
        except InvalidTraversalError as exc:
            logger.info(f"[{self.document.pathway}] rejected answer at '{current.id}': {exc.message}")
            raise

        self._path.append(nxt.id)
        self._answers.append(value)
        logger.debug(f"[{self.document.pathway}] {current.id} --{value!r}--> {nxt.id}")
        return nxt

    def back(self) -> TreeNode:
        """Undo the last step."""
        if len(self._path) == 1:
            raise InvalidTraversalError(
                "Already at the start of the pathway",
                node_id=self._path[0],
            )
        self._path.pop()
        self._answers.pop()
        return self.current

    def reset(self) -> TreeNode:
        self._path = [self.document.root_id]
        self._answers = []
        return self.current

    def snapshot(self) -> Dict[str, Any]:
        current = self.current
        return {
            "pathway": self.document.pathway,
            "current": current.to_dict(),
            "path": list(self._path),
            "answers": list(self._answers),
            "is_terminal": current.is_terminal,
            "available_answers": available_answers(current),
            "history": self.history.to_dict() if self.history is not None else None,
        }


def walk(
    document: PathwayDocument,
    answers: Iterable[Answer],
    history: Optional[PatientHistory] = None,
) -> TraversalCursor:
    """Replay a sequence of answers from the root."""
    cursor = TraversalCursor(document, history=history)
    for value in answers:
        cursor.answer(value)
    return cursor
