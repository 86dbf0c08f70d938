"""Preference management command + handler: set the grades a buyer follows."""

import json

from notifications.domain import notifications
from notifications.preference.preference import GradePreference
from protean.fields import Identifier, Text
from protean.utils.globals import current_domain
from protean.utils.mixins import handle


@notifications.command(part_of="GradePreference")
class SetGradePreferences:
    """Create or replace a buyer's followed grades."""

    customer_id: Identifier(required=True)
    grades: Text(required=True)  # JSON list of grade labels


@notifications.command_handler(part_of=GradePreference)
class ManageGradePreferencesHandler:
    @handle(SetGradePreferences)
    def set_grade_preferences(self, command: SetGradePreferences):
        grades = json.loads(command.grades) if isinstance(command.grades, str) else command.grades

        repo = current_domain.repository_for(GradePreference)
        prefs = repo._dao.query.filter(customer_id=str(command.customer_id)).all().items
        if prefs:
            preference = prefs[0]
            preference.update_grades(grades)
        else:
            preference = GradePreference.create(command.customer_id, grades)
        repo.add(preference)
        return preference.get_grades()
