from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Any, Dict, Optional, Tuple, Type, TypeVar

T = TypeVar('T')


def get_or_create(
    db: Session,
    model_class: Type[T],
    unique_keys: Dict[str, Any],
    defaults: Optional[Dict[str, Any]] = None,
    commit: bool = False
) -> Tuple[T, bool]:
    """
    Get an existing row or create it. Never updates an existing row.

    Args:
        db: Database session
        model_class: SQLAlchemy model class
        unique_keys: Column values identifying the row
        defaults: Extra column values used only when creating
        commit: Whether to commit after creating (default: False)

    Returns:
        Tuple of (model instance, created flag)
        created flag: True if created, False if already existed

    A concurrent insert of the same keys surfaces as IntegrityError; the
    session is rolled back and the winning row returned instead.
    """
    query = db.query(model_class)
    for key, value in unique_keys.items():
        query = query.filter(getattr(model_class, key) == value)

    instance = query.first()
    if instance:
        return instance, False

    instance = model_class(**{**unique_keys, **(defaults or {})})
    db.add(instance)

    try:
        db.flush()
        if commit:
            db.commit()
        return instance, True
    except IntegrityError:
        db.rollback()
        query = db.query(model_class)
        for key, value in unique_keys.items():
            query = query.filter(getattr(model_class, key) == value)
        instance = query.first()
        if instance:
            return instance, False
        raise
