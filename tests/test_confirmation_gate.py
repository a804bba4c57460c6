from staysync.domain.booking_state import BookingStatus
from staysync.domain.confirmation import ConfirmationGate, ConfirmationRequired
from staysync.domain.payment_state import BookingPaymentStatus, PaymentStatus
from staysync.domain.sync_policy import (
    Allow,
    PairState,
    Reject,
    RejectCode,
    RequireConfirmation,
    StatusChanges,
    evaluate,
)

gate = ConfirmationGate()


def test_unconfirmed_request_gets_prompt():
    decision = RequireConfirmation(prompt="Sure?", on_confirm=Allow(StatusChanges(payment_status=PaymentStatus.PAID)))

    resolved = gate.resolve(decision, confirmed=False)

    assert resolved == ConfirmationRequired(prompt="Sure?")


def test_confirmed_request_proceeds_with_deferred_decision():
    on_confirm = Allow(StatusChanges(payment_status=PaymentStatus.PAID))
    decision = RequireConfirmation(prompt="Sure?", on_confirm=on_confirm)

    assert gate.resolve(decision, confirmed=True) is on_confirm


def test_other_decisions_pass_through():
    allow = Allow()
    reject = Reject(RejectCode.PAYMENT_LOCKED, "locked")

    assert gate.resolve(allow, confirmed=False) is allow
    assert gate.resolve(allow, confirmed=True) is allow
    assert gate.resolve(reject, confirmed=True) is reject


def test_confirmation_does_not_override_irreversible_payment():
    state = PairState(BookingStatus.CONFIRMED, BookingPaymentStatus.PAID, PaymentStatus.PAID)

    resolved = gate.resolve(evaluate(state, payment_status=PaymentStatus.UNPAID), confirmed=True)

    assert isinstance(resolved, Reject)
    assert resolved.code == RejectCode.IRREVERSIBLE_PAYMENT


def test_resending_confirmed_request_after_apply_is_noop():
    before = PairState(BookingStatus.PENDING, BookingPaymentStatus.UNPAID, PaymentStatus.UNPAID)
    first = gate.resolve(evaluate(before, payment_status=PaymentStatus.PAID), confirmed=True)
    after = before.apply(first.changes)

    second = gate.resolve(evaluate(after, payment_status=PaymentStatus.PAID), confirmed=True)

    assert isinstance(second, Allow)
    assert second.is_noop
