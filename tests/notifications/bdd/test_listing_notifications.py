"""BDD tests for listing notifications."""

from notifications.notification.listing import MarkNotificationRead, ReviewListing
from notifications.notification.notification import notification_id_for
from notifications.notification.queries import notifications_for
from protean import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

scenarios("features/listing_notifications.feature")


def _review(product_id, grade, status):
    command = ReviewListing(product_id=product_id, status=status, name="Leeks", grade=grade, city="Nuwara Eliya")
    current_domain.process(command, asynchronous=False)


@given(parsers.cfparse('buyer "{customer_id}" follows grades "{grades}"'))
def _(follow_grades, customer_id, grades):
    follow_grades(customer_id, *grades.split(","))


@given(parsers.cfparse('the operator approves "{product_id}" with grade "{grade}"'))
@when(parsers.cfparse('the operator approves "{product_id}" with grade "{grade}"'))
def _(product_id, grade):
    _review(product_id, grade, "Approved")


@when(parsers.cfparse('the operator rejects "{product_id}" with grade "{grade}"'))
def _(product_id, grade):
    _review(product_id, grade, "Rejected")


@given(parsers.cfparse('buyer "{customer_id}" reads the notification for "{product_id}"'))
def _(customer_id, product_id):
    command = MarkNotificationRead(notification_id=notification_id_for(customer_id, product_id))
    current_domain.process(command, asynchronous=False)


@then(parsers.re(r'buyer "(?P<customer_id>[^"]+)" has (?P<count>\d+) unread notifications?'))
def _(customer_id, count):
    assert len(notifications_for(customer_id, unread_only=True)) == int(count)


@then(parsers.cfparse('buyer "{customer_id}" has {count:d} notification in total'))
def _(customer_id, count):
    assert len(notifications_for(customer_id)) == count
