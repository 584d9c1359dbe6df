"""Tests for company routes."""

import uuid

import pytest


@pytest.mark.asyncio
async def test_companies_require_authentication(client, data):
    response = await client.get("/api/companies/")
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_list_companies_alphabetically(authed_client, data):
    response = await authed_client.get("/api/companies/")
    assert response.status_code == 200
    assert [c["name"] for c in response.json()] == ["Andes Minería", "Copec", "Falabella"]


@pytest.mark.asyncio
async def test_list_companies_by_status(authed_client, data):
    response = await authed_client.get("/api/companies/", params={"status": "inactive"})
    assert [c["name"] for c in response.json()] == ["Andes Minería"]

    response = await authed_client.get("/api/companies/", params={"status": "archived"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_table_calls_run_as_signed_in_user(authed_client, data, backend, user_session):
    await authed_client.get("/api/companies/")
    request = backend.requests_to("/rest/v1/companies")[-1]
    assert request.headers["authorization"] == f"Bearer {user_session['access_token']}"
    assert request.headers["apikey"] == "anon-key"


@pytest.mark.asyncio
async def test_get_company(authed_client, data):
    response = await authed_client.get(f"/api/companies/{data['copec']['id']}")
    assert response.status_code == 200
    assert response.json()["industry"] == "Energía"


@pytest.mark.asyncio
async def test_get_missing_company_is_404(authed_client, data):
    missing = uuid.uuid4()
    response = await authed_client.get(f"/api/companies/{missing}")
    assert response.status_code == 404
    assert response.json() == {
        "detail": f"Company with id '{missing}' not found",
        "error": "not_found",
    }


@pytest.mark.asyncio
async def test_create_company_gets_default_fallback_order(authed_client, data, backend):
    response = await authed_client.post("/api/companies/", json={"name": "Entel", "industry": "Telecom"})
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "active"
    assert body["fallback_config"] == {"order": ["WhatsApp", "Telegram", "SMS", "Email"]}

    stored = next(c for c in backend.rows("companies") if c["name"] == "Entel")
    assert stored["created_at"] and stored["updated_at"]


@pytest.mark.asyncio
async def test_create_company_rejects_unknown_channel(authed_client, data):
    response = await authed_client.post(
        "/api/companies/", json={"name": "Entel", "fallback_order": ["Email", "Fax"]}
    )
    assert response.status_code == 422
    assert "Fax" in response.json()["detail"]


@pytest.mark.asyncio
async def test_update_company(authed_client, data):
    response = await authed_client.patch(
        f"/api/companies/{data['andes']['id']}", json={"status": "active", "name": "Andes"}
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Andes"
    assert response.json()["status"] == "active"


@pytest.mark.asyncio
async def test_update_company_clears_optional_fields_only(authed_client, data):
    response = await authed_client.patch(
        f"/api/companies/{data['copec']['id']}", json={"name": None, "industry": None}
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Copec"
    assert response.json()["industry"] is None


@pytest.mark.asyncio
async def test_update_missing_company_is_404(authed_client, data):
    response = await authed_client.patch(f"/api/companies/{uuid.uuid4()}", json={"name": "X"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_company_stats(authed_client, data):
    response = await authed_client.get("/api/companies/stats")
    assert response.status_code == 200
    stats = {c["name"]: c for c in response.json()}

    copec = stats["Copec"]
    assert copec["employee_count"] == 2
    assert copec["sent_messages"] == 10
    assert copec["read_messages"] == 9
    assert copec["scheduled_messages"] == 1
    assert copec["draft_messages"] == 1
    assert copec["next_scheduled_at"] is not None
    assert copec["sentiment_score"] == 0.55
    assert copec["engagement_band"] == "high"
    assert copec["read_rate"] == 90

    falabella = stats["Falabella"]
    assert falabella["sentiment_score"] == -0.68
    assert falabella["sentiment_label"] == "negative"
    assert falabella["fallback_order"] == ["Email", "SMS"]

    andes = stats["Andes Minería"]
    assert andes["employee_count"] == 0
    assert andes["sentiment_score"] == 0
    assert andes["engagement_band"] == "none"
    assert andes["fallback_order"] == ["WhatsApp", "Telegram", "SMS", "Email"]


@pytest.mark.asyncio
async def test_fallback_order(authed_client, data):
    response = await authed_client.get(f"/api/companies/{data['falabella']['id']}/fallback-order")
    assert response.json()["order"] == ["Email", "SMS"]
    assert response.json()["is_default"] is False

    response = await authed_client.get(f"/api/companies/{data['andes']['id']}/fallback-order")
    assert response.json()["order"] == ["WhatsApp", "Telegram", "SMS", "Email"]
    assert response.json()["is_default"] is True


@pytest.mark.asyncio
async def test_set_fallback_order(authed_client, data, backend):
    company_id = data["andes"]["id"]
    response = await authed_client.put(
        f"/api/companies/{company_id}/fallback-order", json={"order": ["sms", "Email", "SMS"]}
    )
    assert response.status_code == 200
    assert response.json()["order"] == ["SMS", "Email"]

    stored = next(c for c in backend.rows("companies") if c["id"] == company_id)
    assert stored["fallback_config"] == {"order": ["SMS", "Email"]}


@pytest.mark.asyncio
async def test_set_fallback_order_validation(authed_client, data):
    company_id = data["andes"]["id"]
    response = await authed_client.put(f"/api/companies/{company_id}/fallback-order", json={"order": []})
    assert response.status_code == 422

    response = await authed_client.put(
        f"/api/companies/{company_id}/fallback-order", json={"order": ["Pigeon"]}
    )
    assert response.status_code == 422

    response = await authed_client.put(
        f"/api/companies/{uuid.uuid4()}/fallback-order", json={"order": ["Email"]}
    )
    assert response.status_code == 404
