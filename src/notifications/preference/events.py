"""Domain events for the GradePreference aggregate."""

from notifications.domain import notifications
from protean.fields import DateTime, Identifier, Text


@notifications.event(part_of="GradePreference")
class GradePreferencesUpdated:
    """A buyer changed the product grades they want to hear about."""

    __version__ = 1

    preference_id: Identifier(required=True)
    customer_id: Identifier(required=True)
    grades: Text(required=True)  # JSON list
    updated_at: DateTime(required=True)
