"""GradePreference aggregate (CQRS): which product grades a buyer follows.

A buyer hears about newly approved listings only for the grades stored
here. Grades are compared ignoring case and surrounding whitespace.
"""

import json
from datetime import UTC, datetime

from notifications.domain import notifications
from notifications.preference.events import GradePreferencesUpdated
from protean.fields import DateTime, Identifier, Text


def _normalize_grades(grades) -> list[str]:
    seen: list[str] = []
    for grade in grades or []:
        key = str(grade).strip().upper()
        if key and key not in seen:
            seen.append(key)
    return seen


@notifications.aggregate
class GradePreference:
    customer_id: Identifier(required=True, unique=True)
    grades: Text()  # JSON list of grade labels, upper-cased
    created_at: DateTime()
    updated_at: DateTime()

    @classmethod
    def create(cls, customer_id, grades):
        now = datetime.now(UTC)
        preference = cls(
            customer_id=customer_id,
            grades=json.dumps(_normalize_grades(grades)),
            created_at=now,
            updated_at=now,
        )
        preference._announce()
        return preference

    def update_grades(self, grades):
        self.grades = json.dumps(_normalize_grades(grades))
        self.updated_at = datetime.now(UTC)
        self._announce()

    def _announce(self):
        self.raise_(
            GradePreferencesUpdated(
                preference_id=str(self.id),
                customer_id=str(self.customer_id),
                grades=self.grades,
                updated_at=self.updated_at,
            )
        )

    def get_grades(self) -> list[str]:
        return json.loads(self.grades) if self.grades else []

    def wants(self, grade) -> bool:
        return bool(grade) and str(grade).strip().upper() in self.get_grades()
