"""
Criterion Registry - registration and lookup of scoring criteria.
"""

from typing import Dict, List, Type
from .base import CriterionDetector


class CriterionRegistry:
    """Singleton registry for criterion detectors.

    Usage:
        @CriterionRegistry.register
        class MyCriterion(CriterionDetector):
            criterion_id = "my_criterion"
            ...

        criteria = CriterionRegistry.get_all()
        weights = CriterionRegistry.get_weights()
    """

    _criteria: Dict[str, CriterionDetector] = {}

    @classmethod
    def register(cls, criterion_class: Type[CriterionDetector]) -> Type[CriterionDetector]:
        """Decorator to register a criterion detector class.

        Raises:
            ValueError: If criterion_id is missing or duplicate, or weight is negative
        """
        instance = criterion_class()

        if not instance.criterion_id:
            raise ValueError(
                f"Criterion {criterion_class.__name__} must define criterion_id"
            )

        if instance.criterion_id in cls._criteria:
            raise ValueError(
                f"Duplicate criterion_id: {instance.criterion_id}"
            )

        if instance.weight < 0:
            raise ValueError(
                f"Criterion {instance.criterion_id} has negative weight"
            )

        cls._criteria[instance.criterion_id] = instance
        return criterion_class

    @classmethod
    def get_all(cls, enabled_only: bool = True) -> List[CriterionDetector]:
        """Get all registered criteria sorted by priority."""
        criteria = list(cls._criteria.values())
        if enabled_only:
            criteria = [c for c in criteria if c.enabled]
        return sorted(criteria, key=lambda c: c.priority)

    @classmethod
    def get_weights(cls, enabled_only: bool = True) -> Dict[str, int]:
        """Get criterion ID to weight mapping, in evaluation order."""
        return {c.criterion_id: c.weight for c in cls.get_all(enabled_only)}

    @classmethod
    def clear(cls) -> None:
        """Clear all registered criteria (for testing)."""
        cls._criteria.clear()

