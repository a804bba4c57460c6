import uuid

BOOKINGS = "/api/v1/bookings"
PAYMENTS = "/api/v1/payments"

STAY = {
    "check_in_date": "2026-11-01T14:00:00Z",
    "check_out_date": "2026-11-04T12:00:00Z",
}


async def create_booking_with_payment(client) -> tuple[str, str]:
    response = await client.post(f"{BOOKINGS}/", json=STAY)
    assert response.status_code == 201
    booking_id = response.json()["id"]

    response = await client.post(
        f"{BOOKINGS}/{booking_id}/payments", json={"amount": 2_400_000, "method": "card"}
    )
    assert response.status_code == 201
    return booking_id, response.json()["id"]


async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


async def test_create_booking(client):
    response = await client.post(f"{BOOKINGS}/", json=STAY, headers={"X-Actor-Id": "admin-1"})

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "Pending"
    assert body["payment_status"] == "Unpaid"
    assert body["version"] == 1


async def test_create_booking_rejects_inverted_dates(client):
    response = await client.post(
        f"{BOOKINGS}/",
        json={"check_in_date": STAY["check_out_date"], "check_out_date": STAY["check_in_date"]},
    )
    assert response.status_code == 422


async def test_get_booking_includes_payment(client):
    booking_id, payment_id = await create_booking_with_payment(client)

    response = await client.get(f"{BOOKINGS}/{booking_id}")

    assert response.status_code == 200
    body = response.json()
    assert body["payment"]["id"] == payment_id
    assert body["payment"]["status"] == "Pending"


async def test_unknown_booking_returns_404(client):
    response = await client.get(f"{BOOKINGS}/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["code"] == "not_found"


async def test_list_bookings(client):
    for _ in range(3):
        await client.post(f"{BOOKINGS}/", json=STAY)

    response = await client.get(f"{BOOKINGS}/", params={"page_size": 2})

    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 3
    assert len(body["bookings"]) == 2


async def test_second_payment_record_is_rejected(client):
    booking_id, _ = await create_booking_with_payment(client)

    response = await client.post(f"{BOOKINGS}/{booking_id}/payments", json={"amount": 1})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


async def test_paid_confirmation_flow(client):
    booking_id, payment_id = await create_booking_with_payment(client)

    # Pending -> Unpaid first, so the next step hits the guarded edge
    response = await client.put(f"{PAYMENTS}/{payment_id}/status", json={"status": "Unpaid"})
    assert response.json()["outcome"] == "applied"

    response = await client.put(f"{PAYMENTS}/{payment_id}/status", json={"status": "Paid"})
    assert response.status_code == 200
    body = response.json()
    assert body["outcome"] == "confirmation_required"
    assert body["prompt"]
    assert body["payment"]["status"] == "Unpaid"

    response = await client.put(
        f"{PAYMENTS}/{payment_id}/status", json={"status": "Paid", "confirmed": True}
    )
    body = response.json()
    assert body["outcome"] == "applied"
    assert body["payment"]["status"] == "Paid"
    assert body["payment"]["paid_at"] is not None
    assert body["booking"]["status"] == "Confirmed"
    assert body["booking"]["payment_status"] == "Paid"
    assert body["side_effects"]

    response = await client.put(
        f"{PAYMENTS}/{payment_id}/status", json={"status": "Paid", "confirmed": True}
    )
    assert response.json()["outcome"] == "unchanged"


async def test_paid_booking_cannot_be_cancelled_or_reverted(client):
    booking_id, payment_id = await create_booking_with_payment(client)
    await client.put(f"{PAYMENTS}/{payment_id}/status", json={"status": "Paid"})

    response = await client.put(f"{BOOKINGS}/{booking_id}/status", json={"status": "Cancelled"})
    assert response.status_code == 409
    assert response.json()["code"] == "payment_locked"

    response = await client.put(
        f"{PAYMENTS}/{payment_id}/status", json={"status": "Unpaid", "confirmed": True}
    )
    assert response.status_code == 409
    assert response.json()["code"] == "irreversible_payment"

    response = await client.get(f"{BOOKINGS}/{booking_id}")
    body = response.json()
    assert body["status"] == "Confirmed"
    assert body["payment"]["status"] == "Paid"


async def test_cancel_voids_deposit(client):
    booking_id, payment_id = await create_booking_with_payment(client)
    await client.put(f"{PAYMENTS}/{payment_id}/status", json={"status": "Deposit"})

    response = await client.put(f"{BOOKINGS}/{booking_id}/status", json={"status": "Cancelled"})

    assert response.status_code == 200
    body = response.json()
    assert body["booking"]["status"] == "Cancelled"
    assert body["booking"]["payment_status"] == "Unpaid"
    assert body["payment"]["status"] == "Unpaid"
    assert body["payment"]["paid_at"] is None


async def test_cancelled_booking_cannot_be_reopened(client):
    response = await client.post(f"{BOOKINGS}/", json=STAY)
    booking_id = response.json()["id"]
    await client.put(f"{BOOKINGS}/{booking_id}/status", json={"status": "Cancelled"})

    response = await client.put(f"{BOOKINGS}/{booking_id}/status", json={"status": "Pending"})

    assert response.status_code == 409
    assert response.json()["code"] == "invalid_transition"


async def test_booking_side_payment_status(client):
    response = await client.post(f"{BOOKINGS}/", json=STAY)
    booking_id = response.json()["id"]

    response = await client.put(
        f"{BOOKINGS}/{booking_id}/payment-status", json={"status": "Deposit"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["outcome"] == "applied"
    assert body["booking"]["payment_status"] == "Deposit"
    assert body["payment"]["status"] == "Deposit"
    assert body["side_effects"] == ["Booking payment status changed from Unpaid to Deposit"]


async def test_booking_side_unpaid_returns_409(client):
    booking_id, payment_id = await create_booking_with_payment(client)
    await client.put(f"{PAYMENTS}/{payment_id}/status", json={"status": "Deposit"})

    response = await client.put(
        f"{BOOKINGS}/{booking_id}/payment-status", json={"status": "Unpaid", "confirmed": True}
    )

    assert response.status_code == 409
    assert response.json()["code"] == "invalid_transition"
    body = (await client.get(f"{BOOKINGS}/{booking_id}")).json()
    assert body["payment_status"] == "Deposit"
    assert body["payment"]["status"] == "Deposit"


async def test_stale_expected_version_returns_409(client):
    response = await client.post(f"{BOOKINGS}/", json=STAY)
    booking_id = response.json()["id"]

    response = await client.put(
        f"{BOOKINGS}/{booking_id}/status", json={"status": "Confirmed", "expected_version": 5}
    )

    assert response.status_code == 409
    assert response.json()["code"] == "conflict"


async def test_unknown_status_value_returns_422(client):
    response = await client.post(f"{BOOKINGS}/", json=STAY)
    booking_id = response.json()["id"]

    response = await client.put(f"{BOOKINGS}/{booking_id}/status", json={"status": "Refunded"})

    assert response.status_code == 422


async def test_unknown_payment_returns_404(client):
    response = await client.put(f"{PAYMENTS}/{uuid.uuid4()}/status", json={"status": "Paid"})
    assert response.status_code == 404


async def test_list_payments(client):
    await create_booking_with_payment(client)

    response = await client.get(f"{PAYMENTS}/")

    assert response.status_code == 200
    assert response.json()["total"] == 1
