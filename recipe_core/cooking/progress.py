# =============================================================================
# recipe_core/cooking/progress.py
# Cooking Mode Step Tracker
# =============================================================================

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from recipe_core.models import Recipe


@dataclass
class StepProgress:
    """
    Progress through one ordered list of steps.

    ``current`` is the index of the step being worked on; every step before
    it counts as completed. ``current == len(steps)`` means finished.
    """
    steps: List[str]
    current: int = 0

    def __post_init__(self):
        self.current = self._clamp(self.current)

    def _clamp(self, index: int) -> int:
        return max(0, min(int(index), len(self.steps)))

    @property
    def total(self) -> int:
        return len(self.steps)

    @property
    def completed(self) -> List[int]:
        return list(range(self.current))

    @property
    def is_finished(self) -> bool:
        return self.total > 0 and self.current >= self.total

    @property
    def percent_complete(self) -> float:
        if not self.steps:
            return 0.0
        return round(100.0 * self.current / self.total, 1)

    @property
    def current_text(self) -> Optional[str]:
        if self.current < self.total:
            return self.steps[self.current]
        return None

    def is_completed(self, index: int) -> bool:
        return index < self.current

    def next(self) -> int:
        self.current = self._clamp(self.current + 1)
        return self.current

    def previous(self) -> int:
        self.current = self._clamp(self.current - 1)
        return self.current

    def jump_to(self, index: int) -> int:
        self.current = self._clamp(index)
        return self.current

    def click(self, index: int) -> int:
        """Clicking the current step completes it; clicking any other step jumps there."""
        if index == self.current:
            return self.next()
        return self.jump_to(index)

    def reset(self) -> None:
        self.current = 0


@dataclass
class ProgressTracker:
    """Cooking progress for a recipe's directions and each additional section."""
    recipe_id: str
    directions: StepProgress
    sections: Dict[str, StepProgress] = field(default_factory=dict)

    @classmethod
    def for_recipe(cls, recipe: Recipe) -> ProgressTracker:
        return cls(
            recipe_id=recipe.id,
            directions=StepProgress(list(recipe.directions), recipe.current_step),
            sections={
                name: StepProgress(list(lines))
                for name, lines in recipe.additional_instructions.items()
            },
        )

    @property
    def current_step(self) -> int:
        """Directions step index, the value persisted on the recipe."""
        return self.directions.current

    @property
    def is_finished(self) -> bool:
        return self.directions.is_finished and all(
            section.is_finished or not section.steps for section in self.sections.values()
        )

    def section(self, name: str) -> StepProgress:
        return self.sections[name]

    def reset(self) -> None:
        self.directions.reset()
        for section in self.sections.values():
            section.reset()
