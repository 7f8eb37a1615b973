import math
from dataclasses import dataclass, asdict
from typing import Optional

from flatjudge.helpers.errors import ValidationError


@dataclass
class EvaluationItem:
    """One weighted rubric criterion of the judge sheet."""
    id: str
    name: str
    weight: float
    min_score: int
    max_score: int
    order: int = 0
    enabled: bool = True

    @classmethod
    def from_dict(cls, raw) -> "EvaluationItem":
        if not isinstance(raw, dict):
            raise ValidationError("Evaluation item must be an object")

        item_id = str(raw.get("id") or "").strip()
        name = str(raw.get("name") or "").strip()
        if not item_id:
            raise ValidationError("Evaluation item id is required")
        if not name:
            raise ValidationError(f"Evaluation item '{item_id}' needs a name")

        try:
            weight = _finite_float(raw.get("weight", 1))
            min_score = _strict_int(raw.get("min_score", 1))
            max_score = _strict_int(raw.get("max_score", 5))
            order = int(raw.get("order", 0) or 0)
        except (TypeError, ValueError):
            raise ValidationError(f"Evaluation item '{item_id}' has non-numeric fields")

        enabled = raw.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValidationError(f"Evaluation item '{item_id}' enabled must be true or false")
        if weight < 0:
            raise ValidationError(f"Evaluation item '{item_id}' weight must be >= 0")
        if min_score > max_score:
            raise ValidationError(f"Evaluation item '{item_id}' min_score is above max_score")

        return cls(
            id=item_id,
            name=name,
            weight=weight,
            min_score=min_score,
            max_score=max_score,
            order=order,
            enabled=enabled,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def accepts(self, score) -> bool:
        return self.min_score <= score <= self.max_score


def _finite_float(value) -> float:
    if isinstance(value, bool):
        raise ValueError("bool is not a weight")
    out = float(value)
    if not math.isfinite(out):
        raise ValueError("weight must be finite")
    return out


def _strict_int(value) -> int:
    # 4.0 is fine, 4.5 / True are not
    if isinstance(value, bool):
        raise ValueError("bool is not a score bound")
    as_float = float(value)
    if not as_float.is_integer():
        raise ValueError("score bounds must be integers")
    return int(as_float)


def parse_items(raw_items) -> list[EvaluationItem]:
    """Validate a full rubric. Ids must be unique; returned sorted by order."""
    if not isinstance(raw_items, list):
        raise ValidationError("evaluation_items must be a list")

    items = [EvaluationItem.from_dict(r) for r in raw_items]

    seen = set()
    for item in items:
        if item.id in seen:
            raise ValidationError(f"Duplicate evaluation item id '{item.id}'")
        seen.add(item.id)

    return sorted(items, key=lambda i: i.order)


def load_items(stored) -> list[EvaluationItem]:
    """Rubric as stored on ContestSettings (already validated on write)."""
    return [EvaluationItem.from_dict(r) for r in (stored or [])]


def enabled_items(items: list[EvaluationItem]) -> list[EvaluationItem]:
    return [i for i in items if i.enabled]


def find_enabled(items: list[EvaluationItem], item_id) -> Optional[EvaluationItem]:
    for item in items:
        if item.id == item_id and item.enabled:
            return item
    return None


def max_possible_score(items: list[EvaluationItem]) -> float:
    """Sum of max_score * weight over enabled items. Recompute after every edit."""
    return sum(i.max_score * i.weight for i in items if i.enabled)
