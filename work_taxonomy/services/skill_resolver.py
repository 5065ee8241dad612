import logging
from typing import Optional, Tuple

from work_taxonomy.common.exceptions import DuplicateSkillNameError, SkillResolutionError
from work_taxonomy.models.records import SkillRecord
from work_taxonomy.services.taxonomy_store import TaxonomyStore

logger = logging.getLogger(__name__)


class SkillResolver:
    """
    Find-or-create a skill by name, matched case-insensitively.

    Safe for concurrent callers resolving the same new name: whoever loses
    the creation race gets DuplicateSkillNameError from the store and
    converges on the winning row.
    """

    def __init__(self, store: TaxonomyStore, default_category: Optional[str] = None):
        self.store = store
        self.default_category = default_category

    def resolve(self, name: str) -> SkillRecord:
        skill, _ = self.resolve_with_status(name)
        return skill

    def resolve_with_status(self, name: str) -> Tuple[SkillRecord, bool]:
        """Resolve a skill and report whether this call created it."""
        if not name or not name.strip():
            raise SkillResolutionError(name or "", "blank skill name")

        skill = self.store.find_skill_by_name_ci(name)
        if skill is not None:
            return skill, False

        try:
            return self.store.create_skill(name, category=self.default_category), True
        except DuplicateSkillNameError as e:
            logger.info(f"Skill {name!r} was created concurrently, re-resolving")
            skill = e.existing or self.store.find_skill_by_name_ci(name)
            if skill is None:
                raise SkillResolutionError(name, "lost creation race but no winner found") from e
            return skill, False
