import json

import pytest
from notifications.preference.management import SetGradePreferences
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed):
    with notifications_bed.domain_context():
        yield


@pytest.fixture()
def follow_grades():
    def _follow(customer_id, *grades):
        command = SetGradePreferences(customer_id=customer_id, grades=json.dumps(list(grades)))
        return current_domain.process(command, asynchronous=False)

    return _follow
