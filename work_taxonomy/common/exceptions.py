"""Exceptions raised by the taxonomy store and the reconciliation services."""

from typing import Optional


class TaxonomyError(Exception):
    """Base class for all taxonomy engine errors."""


# Structural errors: recovered locally by batch operations.

class UnknownWorkTypeError(TaxonomyError):
    def __init__(self, work_type_id: str):
        self.work_type_id = work_type_id
        super().__init__(f"Work type not found: {work_type_id}")


class UnknownSkillError(TaxonomyError):
    def __init__(self, skill_id: str):
        self.skill_id = skill_id
        super().__init__(f"Skill not found: {skill_id}")


class UnknownParentError(TaxonomyError):
    """A node references a parent that does not exist."""

    def __init__(self, kind: str, node_id: str, parent_id: str):
        self.kind = kind
        self.node_id = node_id
        self.parent_id = parent_id
        super().__init__(f"{kind} '{node_id}' references missing parent '{parent_id}'")


class UnknownScopeError(TaxonomyError):
    def __init__(self, kind: str, scope_id: str):
        self.kind = kind
        self.scope_id = scope_id
        super().__init__(f"Unknown {kind} scope: {scope_id}")


# Uniqueness races: benign.

class DuplicateSkillNameError(TaxonomyError):
    """A skill with the same normalized name already exists.

    Raised by create_skill when it loses to an earlier (possibly concurrent)
    writer. Callers treat it as success and use `existing`.
    """

    def __init__(self, name: str, existing=None):
        self.name = name
        self.existing = existing
        super().__init__(f"Skill already exists for name: {name!r}")


class SkillResolutionError(TaxonomyError):
    def __init__(self, name: str, reason: Optional[str] = None):
        self.name = name
        self.reason = reason
        message = f"Could not resolve skill {name!r}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


# Fatal for the current apply/run.

class TaxonomyPersistenceError(TaxonomyError):
    """Wraps a database failure that is not an expected uniqueness race."""


# Supplied data.

class KnowledgeBaseError(TaxonomyError):
    """Knowledge base file is missing or malformed."""


class SeedDataError(TaxonomyError):
    """Taxonomy seed file is missing or malformed."""
