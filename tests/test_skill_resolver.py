from unittest import TestCase
from unittest.mock import patch

from work_taxonomy.common.exceptions import DuplicateSkillNameError, SkillResolutionError
from work_taxonomy.services.memory_store import InMemoryTaxonomyStore
from work_taxonomy.services.skill_resolver import SkillResolver


class TestSkillResolver(TestCase):
    def setUp(self):
        self.store = InMemoryTaxonomyStore()
        self.resolver = SkillResolver(self.store, default_category="design")

    def test_same_name_different_case_resolves_to_one_skill(self):
        first = self.resolver.resolve("React.js")
        second = self.resolver.resolve("react.js ")
        self.assertEqual(first.id, second.id)
        self.assertEqual(len(self.store.skills), 1)

    def test_reports_creation(self):
        skill, created = self.resolver.resolve_with_status("User Research")
        self.assertTrue(created)
        self.assertEqual(skill.category, "design")

        _, created = self.resolver.resolve_with_status("USER RESEARCH")
        self.assertFalse(created)

    def test_blank_name_raises(self):
        with self.assertRaises(SkillResolutionError):
            self.resolver.resolve("   ")
        with self.assertRaises(SkillResolutionError):
            self.resolver.resolve("")

    def test_lost_creation_race_converges_on_winner(self):
        winner = self.store.create_skill("Figma")

        # Lookup misses the concurrently created row; creation then reports the duplicate
        with patch.object(self.store, "find_skill_by_name_ci", return_value=None):
            skill, created = self.resolver.resolve_with_status("figma")

        self.assertEqual(skill.id, winner.id)
        self.assertFalse(created)
        self.assertEqual(len(self.store.skills), 1)

    def test_lost_race_without_winner_raises(self):
        with patch.object(self.store, "find_skill_by_name_ci", return_value=None), \
                patch.object(self.store, "create_skill", side_effect=DuplicateSkillNameError("Figma")):
            with self.assertRaises(SkillResolutionError):
                self.resolver.resolve("Figma")
