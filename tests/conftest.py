"""
Pytest Configuration and Fixtures

Shared fixtures for pathway and NEWS2 tests.
"""
import copy
import sys
from pathlib import Path
from typing import Any, Dict

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pharmacy_first.core.news2 import ConsciousnessLevel, NEWS2Parameters, OxygenScale  # noqa: E402


def _treatment(node_id: str, **fields) -> Dict[str, Any]:
    return {"id": node_id, "type": "treatment", **fields}


def _action(node_id: str, *actions: str, safety_net: bool = False) -> Dict[str, Any]:
    return {"id": node_id, "type": "action", "actions": list(actions), "safetyNet": safety_net}


@pytest.fixture
def pathway_data() -> Dict[str, Any]:
    """Small pathway exercising every branch style and inheritance."""
    return {
        "pathway": "Test Pathway",
        "metadata": {
            "version": "0.1.0",
            "lastUpdated": "2025-01-01",
            "sources": ["Test source"],
            "niceGuideline": "NG0",
        },
        "notes": ["First note", "Second note"],
        "decisionTree": {
            "id": "root",
            "type": "decision",
            "question": "Red flags present?",
            "yes": _action("refer", "Refer to emergency services"),
            "no": {
                "id": "severity",
                "type": "decision",
                "question": "How severe?",
                "choices": [
                    {
                        "label": "Mild",
                        "next": {
                            "id": "info",
                            "type": "decision",
                            "title": "Counselling",
                            "child": _action("self-care", "Fluids", "Rest", safety_net=True),
                        },
                    },
                    {
                        "label": "Severe",
                        "next": {
                            "id": "allergy",
                            "type": "decision",
                            "question": "Penicillin allergy?",
                            "options": [
                                {
                                    "label": "No allergy",
                                    "next": _treatment(
                                        "amoxicillin",
                                        title="Amoxicillin",
                                        drug="Amoxicillin",
                                        durationDays=5,
                                        dose={"amount": "500 mg", "frequency": "three times daily"},
                                        route="oral",
                                        legalCategory="POM",
                                        plus=["Paracetamol"],
                                        safetyNet=True,
                                    ),
                                },
                                {
                                    "label": "Allergic",
                                    "next": _treatment(
                                        "amoxicillin-backup",
                                        inherits="amoxicillin",
                                        title="Back-up amoxicillin",
                                        followUp="Start if no better in 3 days",
                                    ),
                                },
                            ],
                        },
                    },
                ],
            },
        },
        "pgds": {"amoxicillin": {"legalCategory": "POM"}},
        "selfCareAndSafetyNetting": {
            "selfCare": ["Rest"],
            "safetyNet": ["Return if worse"],
        },
        "extraKey": "kept",
    }


@pytest.fixture
def make_pathway(pathway_data):
    """Factory returning a deep copy of the fixture document with a new tree."""
    def _make(tree: Dict[str, Any]) -> Dict[str, Any]:
        data = copy.deepcopy(pathway_data)
        data["decisionTree"] = tree
        return data
    return _make


@pytest.fixture
def data_dir() -> Path:
    """Packaged pathway documents."""
    return Path(__file__).parent.parent / "pharmacy_first" / "data" / "pathways"


@pytest.fixture
def normal_observations() -> NEWS2Parameters:
    """Scenario A: all parameters within normal range."""
    return NEWS2Parameters(
        respiratory_rate=16,
        oxygen_saturation=98,
        oxygen_scale=OxygenScale.SCALE1,
        supplemental_oxygen=False,
        temperature=37.0,
        systolic_bp=120,
        heart_rate=75,
        consciousness=ConsciousnessLevel.ALERT,
    )
