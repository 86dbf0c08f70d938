"""BDD tests for seller payout settlement."""

from ordering.order.payout import advance_payout
from protean.exceptions import ValidationError
from pytest_bdd import given, parsers, scenarios, then, when
from shared.errors import ExternalServiceError

scenarios("features/payout_settlement.feature")


@given(parsers.cfparse('the payout for "{seller_email}" has been advanced'))
def _(placed_order, group_id_for, seller_email):
    advance_payout(placed_order, group_id_for(seller_email))


@given("the payout gateway is unavailable")
def _(gateway):
    gateway.configure(should_succeed=False)


@when(parsers.cfparse('the operator advances the payout for "{seller_email}"'))
def _(placed_order, group_id_for, seller_email, outcome):
    try:
        advance_payout(placed_order, group_id_for(seller_email))
    except (ValidationError, ExternalServiceError) as exc:
        outcome["exc"] = exc


@then(parsers.cfparse("the payout gateway was asked for {amount:f} {currency}"))
def _(gateway, amount, currency):
    [call] = gateway.calls
    assert call["amount"] == amount
    assert call["currency"] == currency


@then("the payout action is refused")
def _(outcome):
    assert isinstance(outcome["exc"], ValidationError)


@then("the payout action fails with a retry hint")
def _(outcome):
    assert isinstance(outcome["exc"], ExternalServiceError)
    assert outcome["exc"].to_dict()["retry_after_seconds"] > 0
