"""
Pathway Registry

Maps a stable slug to the pathway's catalogue entry and its authored JSON
document. Documents are loaded and validated on first request, then
cached for the life of the process.

Adding a pathway:
    1. Drop the authored JSON into data/pathways/
    2. Add a PathwayDefinition to PATHWAY_DEFINITIONS below.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from pharmacy_first.utils import PathwayNotFoundError, get_logger
from .document import PathwayDocument, load_pathway_file

logger = get_logger(__name__)


@dataclass(frozen=True)
class PathwayDefinition:
    slug: str
    title: str
    subtitle: str
    age_range: str
    setting: str
    data_file: str                   # relative to the pathway data directory
    tags: Tuple[str, ...] = field(default_factory=tuple)
    summary_points: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "slug": self.slug,
            "title": self.title,
            "subtitle": self.subtitle,
            "age_range": self.age_range,
            "setting": self.setting,
            "tags": list(self.tags),
            "summary_points": list(self.summary_points),
        }


PATHWAY_DEFINITIONS: Tuple[PathwayDefinition, ...] = (
    PathwayDefinition(
        slug="pharmacy-first-aom",
        title="Acute Otitis Media",
        subtitle="Pharmacy First | Children & young people 1–17 years",
        age_range="1–17 years",
        setting="Community pharmacy, urgent care, primary care",
        data_file="acute_otitis_media.json",
        tags=("otitis media", "pharmacy first", "pediatrics"),
        summary_points=(
            "Aligns with NICE NG91, NICE CKS and Pharmacy First PGDs",
            "Captures otoscopy findings, red flags, bilateral/perforation status",
            "Supports immediate vs back-up antibiotic decisions and self-care counselling",
        ),
    ),
    PathwayDefinition(
        slug="otitis-externa",
        title="Otitis Externa",
        subtitle="Diffuse inflammation of the external auditory canal",
        age_range="≥1 year",
        setting="Community pharmacy, primary care",
        data_file="otitis_externa.json",
        tags=("ear drops", "outer ear"),
        summary_points=(
            "Aligns with NICE CKS otitis externa guidance",
            "Separates self-care, topical treatment and referral",
        ),
    ),
)


def list_definitions() -> List[PathwayDefinition]:
    return list(PATHWAY_DEFINITIONS)


def get_pathway_definition(slug: str) -> Optional[PathwayDefinition]:
    for definition in PATHWAY_DEFINITIONS:
        if definition.slug == slug:
            return definition
    return None


class PathwayRegistry:
    """
    Slug → PathwayDocument lookup with a per-process cache.

    A document that fails validation is not cached; every request for it
    raises MalformedPathwayError again.
    """

    def __init__(
        self,
        data_dir: Union[str, Path],
        definitions: Tuple[PathwayDefinition, ...] = PATHWAY_DEFINITIONS,
    ):
        self.data_dir = Path(data_dir)
        self._definitions: Dict[str, PathwayDefinition] = {d.slug: d for d in definitions}
        self._documents: Dict[str, PathwayDocument] = {}

    def definitions(self) -> List[PathwayDefinition]:
        return list(self._definitions.values())

    def definition(self, slug: str) -> PathwayDefinition:
        definition = self._definitions.get(slug)
        if definition is None:
            raise PathwayNotFoundError(slug)
        return definition

    async def get_document(self, slug: str) -> PathwayDocument:
        definition = self.definition(slug)

        cached = self._documents.get(slug)
        if cached is not None:
            return cached

        path = self.data_dir / definition.data_file
        logger.debug(f"PathwayRegistry: loading '{slug}' from {path}")
        document = await asyncio.to_thread(load_pathway_file, path)
        self._documents[slug] = document
        return document
