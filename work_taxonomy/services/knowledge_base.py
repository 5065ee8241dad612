"""
Knowledge base of suggested skills.

Supplied data, never inferred: a mapping of work-type id -> candidate skill
names, plus fallback tables used when a whole category has no skilled work
type and no work type in it has a direct entry.

File format (JSON):

    {
        "work_types": {
            "design-ux-01-research": ["User Research", "Usability Testing"]
        },
        "focus_area_defaults": {
            "design": ["Visual Design", "User Experience", "Design Systems"]
        },
        "category_keywords": {"analytics": "Analytics"},
        "use_category_label": true
    }
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from work_taxonomy.common.exceptions import KnowledgeBaseError
from work_taxonomy.common.identifiers import normalize_name

logger = logging.getLogger(__name__)

# Keyword in a category label -> skill contributed by the category fallback
DEFAULT_CATEGORY_KEYWORDS: Dict[str, str] = {
    "management": "Management",
    "strategy": "Strategic Planning",
    "design": "Design",
    "development": "Development",
    "marketing": "Marketing",
    "sales": "Sales",
    "operations": "Operations",
    "analytics": "Analytics",
    "data": "Data Analysis",
    "quality": "Quality Assurance",
    "process": "Process Improvement",
    "project": "Project Management",
}


def unique_names(names: Iterable[str]) -> List[str]:
    """Drop blanks and case-insensitive repeats, keeping first-seen order."""
    seen = set()
    result = []
    for name in names:
        key = normalize_name(name or "")
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(" ".join(name.split()))
    return result


class KnowledgeBase(BaseModel):
    work_types: Dict[str, List[str]] = Field(default_factory=dict)
    focus_area_defaults: Dict[str, List[str]] = Field(default_factory=dict)
    category_keywords: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CATEGORY_KEYWORDS))
    use_category_label: bool = True
    focus_area_default_count: int = Field(default=2, ge=0)

    @classmethod
    def from_dict(cls, data: dict) -> "KnowledgeBase":
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise KnowledgeBaseError(f"Invalid knowledge base: {e}") from e

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "KnowledgeBase":
        path = Path(path)
        if not path.exists():
            raise KnowledgeBaseError(f"Knowledge base file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise KnowledgeBaseError(f"Knowledge base {path} is not valid JSON: {e}") from e

        kb = cls.from_dict(data)
        logger.info(
            f"Loaded knowledge base {path}: {len(kb.work_types)} work types, "
            f"{len(kb.focus_area_defaults)} focus area defaults"
        )
        return kb

    def suggest_for_work_type(self, work_type_id: str) -> List[str]:
        return unique_names(self.work_types.get(work_type_id, []))

    def suggest_for_category(
        self,
        category_label: str,
        focus_area_id: str,
        limit: Optional[int] = None
    ) -> List[str]:
        """
        Fallback for an uncovered category: the focus area's first strategic
        skills, one skill per keyword found in the category label, then the
        category label itself.
        """
        defaults = self.focus_area_defaults.get(focus_area_id, [])[:self.focus_area_default_count]
        label = category_label.lower()
        keyword_skills = [
            skill for keyword, skill in self.category_keywords.items()
            if keyword.lower() in label
        ]
        candidates = [*defaults, *keyword_skills]
        if self.use_category_label:
            candidates.append(category_label)

        names = unique_names(candidates)
        return names[:limit] if limit is not None else names
