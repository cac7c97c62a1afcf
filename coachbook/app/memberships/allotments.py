"""Per-service usage rows for a membership's current billing cycle."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from .models import PlanService


@dataclass(frozen=True)
class AllotmentUsage:
    """Usage of one plan service, ready for display."""

    service_id: int
    service_name: str
    used: int
    total: int
    remaining: int
    progress: float
    is_current: bool

    def to_dict(self) -> dict[str, int | float | str | bool]:
        """Serialize the row for API responses."""

        return {
            "service_id": self.service_id,
            "service_name": self.service_name,
            "used": self.used,
            "total": self.total,
            "remaining": self.remaining,
            "progress": self.progress,
            "is_current": self.is_current,
        }


def _usage_row(plan_service: PlanService, current_service_id: Optional[int]) -> AllotmentUsage:
    total = plan_service.quantity or 0
    used = plan_service.used_quantity or 0
    if plan_service.remaining_quantity is not None:
        remaining = plan_service.remaining_quantity
    else:
        remaining = max(0, total - used)
    progress = min(used / total, 1.0) if total > 0 else 0.0
    return AllotmentUsage(
        service_id=plan_service.service_id,
        service_name=plan_service.service_name or f"Service {plan_service.service_id}",
        used=used,
        total=total,
        remaining=remaining,
        progress=progress,
        is_current=plan_service.service_id == current_service_id,
    )


def summarize_allotments(
    plan_services: Iterable[PlanService],
    current_service_id: Optional[int] = None,
) -> List[AllotmentUsage]:
    return [_usage_row(ps, current_service_id) for ps in plan_services]
