"""Tests for the admin JSON API."""

from __future__ import annotations

import pytest


async def _create_form(client, **body):
    body.setdefault("name", "Contact Us")
    response = await client.post("/api/forms", json=body)
    assert response.status_code == 201
    return response.json()


@pytest.mark.asyncio
async def test_field_types(client):
    response = await client.get("/api/field-types")
    assert response.status_code == 200
    types = {t["type"]: t["label"] for t in response.json()}
    assert len(types) == 8
    assert types["textarea"] == "Textarea"
    assert types["radio"] == "Radio Button"


@pytest.mark.asyncio
async def test_create_and_get_form(client):
    created = await _create_form(client, description="Reach out")
    assert created["slug"] == "contact-us"
    assert created["public_url"] == "/forms/contact-us"
    assert created["columns"] == 1
    assert created["fields"] == []

    response = await client.get(f"/api/forms/{created['id']}")
    assert response.status_code == 200
    assert response.json()["description"] == "Reach out"


@pytest.mark.asyncio
async def test_duplicate_slug_is_conflict(client):
    await _create_form(client)
    response = await client.post("/api/forms", json={"name": "Contact Us"})
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_columns_out_of_range_rejected(client):
    response = await client.post("/api/forms", json={"name": "Wide", "columns": 4})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_forms(client):
    await _create_form(client, name="One")
    await _create_form(client, name="Two")
    response = await client.get("/api/forms")
    assert response.status_code == 200
    assert {f["slug"] for f in response.json()} == {"one", "two"}


@pytest.mark.asyncio
async def test_update_form(client):
    form = await _create_form(client)
    response = await client.patch(
        f"/api/forms/{form['id']}", json={"submit_button_text": "Send", "columns": 2}
    )
    assert response.status_code == 200
    assert response.json()["submit_button_text"] == "Send"
    assert response.json()["columns"] == 2


@pytest.mark.asyncio
async def test_missing_form_is_404(client):
    assert (await client.get("/api/forms/999")).status_code == 404
    assert (await client.patch("/api/forms/999", json={"name": "x"})).status_code == 404
    assert (await client.delete("/api/forms/999")).status_code == 404


@pytest.mark.asyncio
async def test_add_field_derives_key_and_rules(client):
    form = await _create_form(client)
    response = await client.post(
        f"/api/forms/{form['id']}/fields",
        json={"label": "First Name", "is_required": True, "validation_rules": "min:2|max:50"},
    )
    assert response.status_code == 201
    field = response.json()
    assert field["key"] == "first_name"
    assert field["type_label"] == "Text Input"
    assert field["compiled_rules"] == ["required", "min:2", "max:50"]
    assert field["sort_order"] == 0


@pytest.mark.asyncio
async def test_duplicate_field_key_is_conflict(client):
    form = await _create_form(client)
    url = f"/api/forms/{form['id']}/fields"
    assert (await client.post(url, json={"label": "Email"})).status_code == 201
    assert (await client.post(url, json={"label": "Email"})).status_code == 409


@pytest.mark.asyncio
async def test_invalid_field_type_rejected(client):
    form = await _create_form(client)
    response = await client.post(
        f"/api/forms/{form['id']}/fields", json={"label": "Phone", "field_type": "phone"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_and_delete_field(client):
    form = await _create_form(client)
    field = (await client.post(f"/api/forms/{form['id']}/fields", json={"label": "Name"})).json()
    url = f"/api/forms/{form['id']}/fields/{field['id']}"

    response = await client.patch(url, json={"field_type": "textarea", "placeholder": "Tell us"})
    assert response.status_code == 200
    assert response.json()["field_type"] == "textarea"
    assert response.json()["placeholder"] == "Tell us"

    assert (await client.delete(url)).status_code == 204
    assert (await client.delete(url)).status_code == 404


@pytest.mark.asyncio
async def test_field_from_other_form_is_404(client):
    first = await _create_form(client, name="First")
    second = await _create_form(client, name="Second")
    field = (await client.post(f"/api/forms/{first['id']}/fields", json={"label": "Name"})).json()
    response = await client.patch(
        f"/api/forms/{second['id']}/fields/{field['id']}", json={"label": "Hijack"}
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_reorder_fields(client):
    form = await _create_form(client)
    url = f"/api/forms/{form['id']}/fields"
    ids = [(await client.post(url, json={"label": label})).json()["id"] for label in ("A", "B", "C")]
    response = await client.post(f"{url}/reorder", json={"field_ids": [ids[2], ids[0], ids[1]]})
    assert response.status_code == 200
    assert [f["label"] for f in response.json()] == ["C", "A", "B"]


@pytest.mark.asyncio
async def test_submission_listing_and_detail(client):
    form = await _create_form(client, name="Order")
    await client.post(
        f"/api/forms/{form['id']}/fields",
        json={
            "label": "Size",
            "field_type": "select",
            "options": [{"value": "s", "label": "Small"}, {"value": "l", "label": "Large"}],
        },
    )
    await client.post("/forms/order", json={"size": "l"})
    await client.post("/forms/order", json={"size": "s"})

    page = (await client.get(f"/api/forms/{form['id']}/submissions?limit=1")).json()
    assert page["total"] == 2
    assert page["limit"] == 1
    assert len(page["items"]) == 1

    sub_id = page["items"][0]["id"]
    detail = await client.get(f"/api/submissions/{sub_id}")
    assert detail.status_code == 200
    assert detail.json()["formatted"]["Size"] in ("Small", "Large")
    assert (await client.get("/api/submissions/999")).status_code == 404


@pytest.mark.asyncio
async def test_delete_form(client):
    form = await _create_form(client)
    assert (await client.delete(f"/api/forms/{form['id']}")).status_code == 204
    assert (await client.get(f"/api/forms/{form['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_patch_form_rejects_null_for_required_columns(client):
    form = await _create_form(client)
    for body in ({"name": None}, {"columns": None}, {"is_active": None}):
        response = await client.patch(f"/api/forms/{form['id']}", json=body)
        assert response.status_code == 422

    detail = (await client.get(f"/api/forms/{form['id']}")).json()
    assert detail["name"] == "Contact Us"
    assert detail["is_active"] is True


@pytest.mark.asyncio
async def test_patch_form_allows_clearing_optional_columns(client):
    form = await _create_form(client, description="Reach out")
    response = await client.patch(f"/api/forms/{form['id']}", json={"description": None})
    assert response.status_code == 200
    assert response.json()["description"] is None


@pytest.mark.asyncio
async def test_patch_field_rejects_null_for_required_columns(client):
    form = await _create_form(client)
    field = (await client.post(f"/api/forms/{form['id']}/fields", json={"label": "Name"})).json()
    url = f"/api/forms/{form['id']}/fields/{field['id']}"
    for body in ({"is_required": None}, {"label": None}, {"sort_order": None}):
        response = await client.patch(url, json=body)
        assert response.status_code == 422

    response = await client.patch(url, json={"placeholder": None, "is_required": True})
    assert response.status_code == 200
    assert response.json()["is_required"] is True
