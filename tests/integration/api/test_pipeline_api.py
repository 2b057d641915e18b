from __future__ import annotations

from app.core.config import get_config

PREFIX = get_config().API_PREFIX


def _create_stages(client, slugs):
    registry = client.post(f"{PREFIX}/registries", json={"name": "Sales"}).json()
    stages = [
        client.post(f"{PREFIX}/registries/{registry['id']}/stages", json={"name": slug.title(), "slug": slug}).json()
        for slug in slugs
    ]
    return registry, stages


def test_health_reports_service_and_version(api_client):
    response = api_client.get(f"{PREFIX}/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["service"] == get_config().APP_NAME
    assert body["version"] == get_config().APP_VERSION


def test_stage_lifecycle_over_http(api_client):
    registry, stages = _create_stages(api_client, ["new", "contact", "closed"])
    assert [s["position"] for s in stages] == [0, 1, 2]

    duplicate = api_client.post(
        f"{PREFIX}/registries/{registry['id']}/stages",
        json={"name": "Again", "slug": "new"},
    )
    assert duplicate.status_code == 409
    assert duplicate.json() == {
        "status": "error",
        "error_code": "duplicate_slug",
        "detail": "Slug 'new' is already used by an active stage",
    }

    reorder = api_client.post(f"{PREFIX}/stages/{stages[2]['id']}/reorder", json={"target_index": 0})
    assert reorder.status_code == 200
    assert len(reorder.json()) == 3
    again = api_client.post(f"{PREFIX}/stages/{stages[2]['id']}/reorder", json={"target_index": 0})
    assert again.json() == []

    out_of_range = api_client.post(f"{PREFIX}/stages/{stages[0]['id']}/reorder", json={"target_index": 5})
    assert out_of_range.status_code == 400
    assert out_of_range.json()["error_code"] == "index_out_of_range"

    archived = api_client.post(f"{PREFIX}/stages/{stages[0]['id']}/archive")
    assert archived.status_code == 200
    assert archived.json()["is_active"] is False

    listing = api_client.get(f"{PREFIX}/registries/{registry['id']}/stages").json()
    assert [(s["slug"], s["position"]) for s in listing] == [("closed", 0), ("contact", 1)]

    missing = api_client.post(f"{PREFIX}/stages/9999/archive")
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "unknown_stage"


def test_unknown_registry_is_not_found(api_client):
    response = api_client.post(f"{PREFIX}/registries/404/stages", json={"name": "X", "slug": "x"})
    assert response.status_code == 404
    assert response.json()["error_code"] == "unknown_registry"


def test_lead_moves_over_http(api_client):
    registry, stages = _create_stages(api_client, ["new", "contact"])
    lead = api_client.post(f"{PREFIX}/registries/{registry['id']}/leads", json={"name": "Ana"}).json()
    assert lead["stage_id"] == stages[0]["id"]

    moved = api_client.post(
        f"{PREFIX}/leads/{lead['id']}/stage",
        json={"stage_id": stages[1]["id"], "actor": "maria"},
    )
    assert moved.status_code == 200
    skipped = api_client.post(
        f"{PREFIX}/leads/{lead['id']}/status",
        json={"status": "closed", "actor": "maria"},
    )
    assert skipped.status_code == 409

    history = api_client.get(f"{PREFIX}/leads/{lead['id']}/history").json()
    assert len(history) == 1
    assert history[0]["new_stage_id"] == stages[1]["id"]

    locked = api_client.patch(f"{PREFIX}/stages/{stages[1]['id']}", json={"slug": "renamed"})
    assert locked.status_code == 409
    assert locked.json()["error_code"] == "immutable_slug"


def test_order_transitions_and_tracking_over_http(api_client):
    order = api_client.post(f"{PREFIX}/orders", json={"patient_id": 5, "total_amount": "320.00"}).json()
    assert order["status"] == "pending"

    skip = api_client.post(f"{PREFIX}/orders/{order['id']}/transitions", json={"status": "shipped"})
    assert skip.status_code == 409
    assert skip.json()["error_code"] == "invalid_transition"

    for status in ("paid", "regulatory_approved", "importing", "shipped", "delivered"):
        response = api_client.post(f"{PREFIX}/orders/{order['id']}/transitions", json={"status": status})
        assert response.status_code == 200

    terminal = api_client.post(f"{PREFIX}/orders/{order['id']}/transitions", json={"status": "cancelled"})
    assert terminal.status_code == 409
    assert terminal.json()["error_code"] == "terminal_state"

    tracked = api_client.put(f"{PREFIX}/orders/{order['id']}/tracking/regulatory", json={"code": "ANV-77"})
    assert tracked.status_code == 200
    assert tracked.json()["regulatory_tracking_code"] == "ANV-77"
    assert tracked.json()["status"] == "delivered"

    bad_kind = api_client.put(f"{PREFIX}/orders/{order['id']}/tracking/pigeon", json={"code": "X"})
    assert bad_kind.status_code == 400

    missing = api_client.put(f"{PREFIX}/orders/9999/tracking/carrier", json={"code": "X"})
    assert missing.status_code == 404
    assert missing.json()["error_code"] == "unknown_order"

    events = api_client.get(f"{PREFIX}/orders/{order['id']}/events").json()
    assert [e["new_status"] for e in events][-1] == "delivered"

    pending = api_client.get(f"{PREFIX}/outbox/order-events").json()
    ack = api_client.post(
        f"{PREFIX}/outbox/order-events/dispatched",
        json={"event_ids": [e["id"] for e in pending]},
    )
    assert ack.json() == {"dispatched": 5}
    assert api_client.get(f"{PREFIX}/outbox/order-events").json() == []


def test_process_projection_over_http(api_client):
    response = api_client.post(
        f"{PREFIX}/process/project",
        json={
            "prescriptions": [{}],
            "regulatory_approvals": [{"status": "approved"}],
            "orders": [{"status": "cancelled"}],
        },
    )
    assert response.status_code == 200
    body = response.json()
    assert body["step_index"] == 3
    assert body["current_step"] == "order"
    assert [s["state"] for s in body["steps"]] == ["completed"] * 3 + ["current"] + ["pending"] * 2

    empty = api_client.get(f"{PREFIX}/patients/42/process").json()
    assert empty["current_step"] == "consultation"


def test_affiliate_metrics_and_leaderboard_over_http(api_client):
    carla = api_client.post(
        f"{PREFIX}/affiliates",
        json={"name": "Carla", "custom_code": "carla", "commission_rate": "15"},
    ).json()
    assert carla["affiliate_code"] == "CARLA"
    assert carla["referral_link"].endswith("/?ref=CARLA")

    bruno = api_client.post(f"{PREFIX}/affiliates", json={"name": "Bruno", "custom_code": "BRUNO"}).json()

    assert api_client.post(f"{PREFIX}/tracking/click", json={"code": "CARLA"}).json()["recorded"] is True
    assert api_client.post(f"{PREFIX}/tracking/click", json={"code": "NOBODY"}).json() == {
        "recorded": False,
        "event_id": None,
    }
    for ref in ("c1", "c2"):
        api_client.post(f"{PREFIX}/tracking/registration", json={"code": "CARLA", "client_ref": ref})

    order = api_client.post(
        f"{PREFIX}/orders",
        json={"patient_id": 1, "total_amount": "200.00", "affiliate_id": carla["id"]},
    ).json()
    api_client.post(f"{PREFIX}/orders/{order['id']}/transitions", json={"status": "paid"})

    metrics = api_client.get(f"{PREFIX}/affiliates/{carla['id']}/metrics").json()
    assert metrics["clicks"] == 1
    assert metrics["registrations"] == 2
    assert metrics["purchases"] == 1
    assert metrics["total_revenue"] == "200.00"
    assert metrics["total_commission"] == "30.00"
    assert metrics["conversion_rate"] == "50.0"

    again = api_client.post(f"{PREFIX}/affiliates/{carla['id']}/purchases", json={"order_id": order["id"]})
    assert again.status_code == 409
    assert again.json()["error_code"] == "duplicate_purchase"
    stolen = api_client.post(f"{PREFIX}/affiliates/{bruno['id']}/purchases", json={"order_id": order["id"]})
    assert stolen.status_code == 400
    assert api_client.get(f"{PREFIX}/affiliates/{carla['id']}/metrics").json()["purchases"] == 1

    board = api_client.get(f"{PREFIX}/affiliates/leaderboard").json()
    assert [m["affiliate_id"] for m in board] == [carla["id"], bruno["id"]]

    bad_rate = api_client.post(f"{PREFIX}/affiliates", json={"name": "Neg", "commission_rate": "-1"})
    assert bad_rate.status_code == 400
    assert bad_rate.json()["error_code"] == "invalid_commission_rate"

    duplicate = api_client.post(f"{PREFIX}/affiliates", json={"name": "Dup", "custom_code": "CARLA"})
    assert duplicate.status_code == 409

    missing = api_client.get(f"{PREFIX}/affiliates/404/metrics")
    assert missing.status_code == 404


def test_missing_record_lookups_use_error_envelope(api_client):
    order = api_client.get(f"{PREFIX}/orders/9999")
    assert order.status_code == 404
    assert order.json() == {
        "status": "error",
        "error_code": "unknown_order",
        "detail": "Order 9999 not found",
    }

    affiliate = api_client.get(f"{PREFIX}/affiliates/9999")
    assert affiliate.status_code == 404
    assert affiliate.json()["status"] == "error"
    assert affiliate.json()["error_code"] == "unknown_affiliate"

    lead = api_client.get(f"{PREFIX}/leads/9999")
    assert lead.status_code == 404
    assert lead.json()["error_code"] == "unknown_lead"
