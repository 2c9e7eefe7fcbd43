from fastapi.testclient import TestClient

from backend.economics.main import app

client = TestClient(app)

PACKAGE = {"id": "pkg1", "price_unit": "100", "duration_target": 60, "equipment_category": "kite"}


def _booking_payload(bid="b1", minutes=60, kind="fixed", rate="30", referral=None):
    return {
        "id": bid,
        "student_package": {"id": f"sp-{bid}", "school_package": PACKAGE, "referral": referral},
        "student_ids": ["s1"],
        "lessons": [
            {
                "id": f"{bid}-l1",
                "instructor_id": "t1",
                "commission": {"type": kind, "rate": rate},
                "sessions": [{"id": f"{bid}-e1", "duration_minutes": minutes, "status": "completed"}],
            }
        ],
        "payments": [{"amount": "40", "student_id": "s1"}],
    }


def test_revenue_endpoint():
    response = client.post(
        "/economics/revenue",
        json={"price_unit": "50", "participant_count": 2, "consumed_minutes": 120, "target_minutes": 600},
    )
    assert response.status_code == 200
    assert response.json() == {"revenue": "20.00"}


def test_commission_endpoint_fixed_rate():
    response = client.post(
        "/economics/commission",
        json={"consumed_minutes": 90, "type": "fixed", "rate": "20"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["rate_label"] == "20/hr"
    assert float(data["earned"]) == 30.0


def test_commission_endpoint_rejects_unknown_type():
    response = client.post(
        "/economics/commission",
        json={"consumed_minutes": 90, "type": "bonus", "rate": "20"},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "INVALID_RATE_SCHEME"


def test_completion_endpoint():
    response = client.post(
        "/economics/completion",
        json={
            "target_minutes": 600,
            "sessions": [
                {"id": "e1", "duration_minutes": 240, "status": "completed"},
                {"id": "e2", "duration_minutes": 120, "status": "planned"},
            ],
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert data["ratio"] == 0.6
    assert [segment["status"] for segment in data["segments"]] == ["completed", "scheduled", "remainder"]


def test_booking_endpoint_reports_net():
    response = client.post("/economics/bookings", json=_booking_payload())
    assert response.status_code == 200
    data = response.json()
    assert float(data["money_in"]) == 100.0
    assert float(data["money_out"]) == 30.0
    assert float(data["net"]) == 70.0
    assert float(data["balance"]) == 60.0
    assert data["errors"] == []


def test_booking_endpoint_surfaces_unknown_commission_as_error():
    response = client.post("/economics/bookings", json=_booking_payload(kind="bonus"))
    assert response.status_code == 200
    data = response.json()
    assert data["money_out"] is None
    assert data["net"] is None
    assert len(data["errors"]) == 1


def test_transactions_endpoint():
    response = client.post("/economics/bookings/transactions", json=_booking_payload())
    assert response.status_code == 200
    rows = response.json()
    assert len(rows) == 1
    assert rows[0]["duration_label"] == "1h"


def test_commission_groups_endpoint_filters_instructor():
    payload = [_booking_payload("b1"), _booking_payload("b2", minutes=30)]
    response = client.post("/economics/commission-groups", params={"instructor_id": "t1"}, json=payload)
    assert response.status_code == 200
    groups = response.json()
    assert len(groups) == 1
    assert groups[0]["lesson_count"] == 2
    assert float(groups[0]["earned"]) == 45.0

    response = client.post("/economics/commission-groups", params={"instructor_id": "t2"}, json=payload)
    assert response.json() == []


def test_rollup_endpoint_totals():
    payload = [
        _booking_payload("b1", minutes=60, rate="30"),
        _booking_payload("b3", minutes=30, rate="20"),
    ]
    response = client.post("/economics/rollup/bookings", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["total"]["count"] == 2
    assert float(data["total"]["money_in"]) == 150.0
    assert float(data["total"]["money_out"]) == 40.0
    assert float(data["total"]["net"]) == 110.0
    assert list(data["groups"]) == ["all"]


def test_rollup_endpoint_groups_by_referral():
    referral = {"code": "HOTEL", "type": "percentage", "value": "10"}
    payload = [_booking_payload("b1"), _booking_payload("b2", referral=referral)]
    response = client.post("/economics/rollup/bookings", params={"group_by": "referral"}, json=payload)
    assert response.status_code == 200
    groups = response.json()["groups"]
    assert set(groups) == {"none", "HOTEL"}
    assert float(groups["HOTEL"]["money_out"]) == 40.0


def test_rollup_endpoint_unknown_kind():
    response = client.post("/economics/rollup/boats", json=[])
    assert response.status_code == 404


def test_rollup_endpoint_unknown_group():
    response = client.post("/economics/rollup/students", params={"group_by": "colour"}, json=[])
    assert response.status_code == 400


def test_rollup_endpoint_rejects_malformed_rows():
    response = client.post("/economics/rollup/instructors", json=[{"username": "no-id"}])
    assert response.status_code == 422


def test_transactions_endpoint_survives_one_bad_lesson():
    payload = _booking_payload()
    payload["lessons"].append(
        {
            "id": "b1-l2",
            "instructor_id": "t2",
            "commission": {"type": "bogus", "rate": "30"},
            "sessions": [{"id": "b1-e2", "duration_minutes": 30, "status": "completed"}],
        }
    )

    response = client.post("/economics/bookings/transactions", json=payload)

    assert response.status_code == 200
    rows = {row["lesson_id"]: row for row in response.json()}
    assert float(rows["b1-l1"]["instructor_earning"]) == 30.0
    assert rows["b1-l2"]["instructor_earning"] is None


def test_commission_endpoint_rejects_percentage_above_hundred():
    response = client.post(
        "/economics/commission",
        json={"consumed_minutes": 60, "type": "percentage", "rate": "250", "base_revenue": "100"},
    )
    assert response.status_code == 422
    assert response.json()["detail"]["code"] == "RATE_OUT_OF_RANGE"
