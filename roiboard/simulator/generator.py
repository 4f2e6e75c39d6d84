"""Scenario generator — reproducible task records for demos and tests."""

import random
from datetime import datetime, timedelta, timezone
from typing import Any

from roiboard.models.task import Priority

STATUSES = ("open", "in-progress", "done")

_VERBS = ("Draft", "Review", "Ship", "Refactor", "Audit", "Migrate", "Plan", "Fix")
_NOUNS = ("pricing page", "invoice export", "onboarding flow", "search index",
          "billing API", "landing copy", "metrics dashboard", "mobile build")


class ScenarioGenerator:
    """Generates deterministic raw task records (wire shape) using a seeded RNG."""

    def __init__(self, seed: int = 42):
        self.rng = random.Random(seed)
        self._task_counter = 0
        self._epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def generate_records(
        self,
        num_tasks: int = 20,
        invalid_share: float = 0.2,
        duplicate_title_share: float = 0.1,
    ) -> list[dict[str, Any]]:
        """Generate camelCase task records as an external fetch layer would return them.

        Args:
            num_tasks: How many records to produce.
            invalid_share: Fraction of records whose ROI inputs are unusable
                           (missing revenue, zero or negative time, negative revenue).
            duplicate_title_share: Fraction reusing an earlier title, so the
                                   comparator's later tie-break keys get exercised.
        """
        records: list[dict[str, Any]] = []

        for _ in range(num_tasks):
            task_id = f"task-{self._task_counter:04d}"
            self._task_counter += 1

            if records and self.rng.random() < duplicate_title_share:
                title = self.rng.choice(records)["title"]
            else:
                title = f"{self.rng.choice(_VERBS)} {self.rng.choice(_NOUNS)}"

            revenue: Any = round(self.rng.uniform(0.0, 5000.0), 2)
            time_taken: Any = round(self.rng.uniform(0.5, 80.0), 1)
            if self.rng.random() < invalid_share:
                revenue, time_taken = self._invalid_inputs(revenue, time_taken)

            created_at = self._epoch + timedelta(minutes=self._task_counter * 37)

            records.append({
                "id": task_id,
                "title": title,
                "revenue": revenue,
                "timeTaken": time_taken,
                "priority": self.rng.choice(list(Priority)).value,
                "status": self.rng.choice(STATUSES),
                "notes": "",
                "createdAt": created_at.isoformat(),
            })

        return records

    def generate_inputs(self, num_tasks: int = 5) -> list[dict[str, Any]]:
        """Creation inputs (no id/createdAt) for exercising TaskStore.create()."""
        return [
            {k: v for k, v in record.items() if k not in ("id", "createdAt")}
            for record in self.generate_records(num_tasks, invalid_share=0.0)
        ]

    def _invalid_inputs(self, revenue: float, time_taken: float) -> tuple[Any, Any]:
        kind = self.rng.choice(("no_revenue", "zero_time", "negative_time", "negative_revenue"))
        if kind == "no_revenue":
            return None, time_taken
        if kind == "zero_time":
            return revenue, 0.0
        if kind == "negative_time":
            return revenue, -time_taken
        return -(revenue or 1.0), time_taken
