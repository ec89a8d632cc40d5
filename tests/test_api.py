"""Tests for the HTTP API."""

from datetime import datetime
from decimal import Decimal
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from PIL import Image

from rentledger.core.config import settings
from rentledger.services.photo import read_capture_time

ADDRESS = {
    "country": "Poland",
    "city": "Poznan",
    "street": "Polwiejska",
    "building_number": "5",
    "flat_number": "12",
    "postal_code": "61-888",
}


def _jpeg(taken_at: str | None = None) -> bytes:
    buffer = BytesIO()
    image = Image.new("RGB", (8, 8), color=(200, 30, 30))
    if taken_at:
        exif = Image.Exif()
        exif[306] = taken_at
        image.save(buffer, format="JPEG", exif=exif)
    else:
        image.save(buffer, format="JPEG")
    return buffer.getvalue()


def _create_rent(client: TestClient) -> dict[str, int]:
    """Helper: create landlord, property with rate, tenant and rent; return their ids."""
    landlord = client.post(
        "/api/landlords/",
        json={"name": "Marek", "surname": "Wisniewski", "email": "marek@example.com", "address": ADDRESS},
    )
    assert landlord.status_code == 201
    landlord_id = landlord.json()["id"]

    prop = client.post(
        "/api/properties/",
        json={
            "flat_label": "Polwiejska 5/12",
            "room_count": 2,
            "flat_size": "40.00",
            "has_gas": True,
            "landlord_id": landlord_id,
            "address": ADDRESS,
        },
    )
    assert prop.status_code == 201
    property_id = prop.json()["id"]

    rate = client.put(
        f"/api/properties/{property_id}/rate",
        json={
            "landlord_rent": "1800.00",
            "cold_water_price": "12.00",
            "gas_price": "3.10",
            "energy_price": "0.90",
            "gas_subscription": "20.00",
            "water_vat": "8",
            "gas_vat": "23",
            "energy_vat": "23",
        },
    )
    assert rate.status_code == 200

    tenant = client.post(
        "/api/tenants/",
        json={"name": "Zofia", "surname": "Lewandowska", "email": "zofia@example.com", "address": ADDRESS},
    )
    assert tenant.status_code == 201
    tenant_id = tenant.json()["id"]

    rent = client.post(
        "/api/rents/",
        json={
            "property_id": property_id,
            "tenant_id": tenant_id,
            "landlord_id": landlord_id,
            "rent_purpose": "live",
            "start_rent": "2024-01-01",
            "end_rent": "2099-12-31",
            "tenant_count": 1,
            "rent_deposit": "3600.00",
            "pay_day_delay": 7,
            "send_state_day": 25,
            "initial_readings": {"cold_water": "10", "gas": "100", "energy": "500"},
        },
    )
    assert rent.status_code == 201
    return {
        "landlord": landlord_id,
        "property": property_id,
        "tenant": tenant_id,
        "rent": rent.json()["id"],
    }


def _append_confirmed_state(client: TestClient, rent_id: int) -> int:
    response = client.post(
        f"/api/rents/{rent_id}/states",
        json={"cold_water": "15", "gas": "130", "energy": "600"},
    )
    assert response.status_code == 201
    state_id = response.json()["id"]
    assert client.post(f"/api/states/{state_id}/confirm").status_code == 200
    return state_id


class TestBillingFlow:
    """Rent, states and invoices through the API."""

    def test_create_rent_with_initial_state(self, client: TestClient) -> None:
        ids = _create_rent(client)

        states = client.get(f"/api/rents/{ids['rent']}/states").json()

        assert len(states) == 1
        assert states[0]["is_initial"] is True
        assert Decimal(states[0]["gas"]) == Decimal("100")
        assert states[0]["hot_water"] is None

    def test_issue_invoice(self, client: TestClient) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])

        response = client.post(f"/api/states/{state_id}/invoice", json={"landlord_comment": "February"})

        assert response.status_code == 201
        invoice = response.json()
        # cold 5 x 12.00 = 60.00 + 4.80 VAT; gas 30 x 3.10 = 93.00 + 21.39 VAT;
        # energy 100 x 0.90 = 90.00 + 20.70 VAT; gas subscription 20.00 + 4.60 VAT;
        # landlord rent 1800.00; housing rent 0.00
        assert Decimal(invoice["total_net"]) == Decimal("2063.00")
        assert Decimal(invoice["total_vat"]) == Decimal("51.49")
        assert Decimal(invoice["total_gross"]) == Decimal("2114.49")
        assert len(invoice["lines"]) == 6
        assert invoice["landlord_comment"] == "February"

        listed = client.get(f"/api/rents/{ids['rent']}/invoices").json()
        assert [i["id"] for i in listed] == [invoice["id"]]

    def test_issue_twice_is_bad_request(self, client: TestClient) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])
        client.post(f"/api/states/{state_id}/invoice")

        response = client.post(f"/api/states/{state_id}/invoice")

        assert response.status_code == 400
        assert response.json()["error"]["type"] == "validation_error"

    def test_lower_reading_is_bad_request(self, client: TestClient) -> None:
        ids = _create_rent(client)

        response = client.post(
            f"/api/rents/{ids['rent']}/states",
            json={"cold_water": "9", "gas": "130", "energy": "600"},
        )

        assert response.status_code == 400
        assert "cold_water" in response.json()["error"]["message"]

    def test_previous_and_latest(self, client: TestClient) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])

        latest = client.get(f"/api/rents/{ids['rent']}/states/latest").json()
        previous = client.get(f"/api/states/{state_id}/previous").json()

        assert latest["id"] == state_id
        assert previous["is_initial"] is True
        assert client.get(f"/api/states/{previous['id']}/previous").status_code == 404

    def test_correct_and_delete_state(self, client: TestClient) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])

        corrected = client.put(
            f"/api/states/{state_id}",
            json={"cold_water": "16", "gas": "130", "energy": "600"},
        )
        assert corrected.status_code == 200
        assert corrected.json()["is_confirmed"] is False

        assert client.delete(f"/api/states/{state_id}").status_code == 204
        assert client.get(f"/api/states/{state_id}").status_code == 404

    def test_invoice_document_and_distribution(self, client: TestClient) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])
        invoice_id = client.post(f"/api/states/{state_id}/invoice").json()["id"]

        upload = client.put(
            f"/api/invoices/{invoice_id}/document",
            files={"file": ("feb.pdf", b"%PDF-1.4 test", "application/pdf")},
        )
        assert upload.status_code == 200
        assert upload.json()["file_name"] == "feb.pdf"

        download = client.get(f"/api/invoices/{invoice_id}/document")
        assert download.content == b"%PDF-1.4 test"
        assert "feb.pdf" in download.headers["content-disposition"]

        assert client.post(f"/api/invoices/{invoice_id}/distribute").json()["is_distributed"] is True
        assert client.delete(f"/api/invoices/{invoice_id}").status_code == 400

    def test_rate_history(self, client: TestClient) -> None:
        ids = _create_rent(client)

        missing_gas_price = client.put(
            f"/api/properties/{ids['property']}/rate",
            json={"cold_water_price": "13.00", "energy_price": "1.00"},
        )
        assert missing_gas_price.status_code == 400

        client.put(
            f"/api/properties/{ids['property']}/rate",
            json={"cold_water_price": "13.00", "gas_price": "3.20", "energy_price": "1.00"},
        )
        history = client.get(f"/api/properties/{ids['property']}/rate/history").json()

        assert [r["is_active"] for r in history] == [True, False]
        current = client.get(f"/api/properties/{ids['property']}/rate").json()
        assert Decimal(current["cold_water_price"]) == Decimal("13.00")


class TestPhotos:
    """Meter photos of a state."""

    def test_read_capture_time(self) -> None:
        assert read_capture_time(_jpeg("2024:05:01 10:30:00")) == datetime(2024, 5, 1, 10, 30)
        assert read_capture_time(_jpeg()) is None

    def test_upload_and_download(self, client: TestClient) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])
        image = _jpeg("2024:02:25 18:00:00")

        response = client.put(
            f"/api/states/{state_id}/photos/gas",
            files={"file": ("gas.jpg", image, "image/jpeg")},
        )

        assert response.status_code == 200
        assert response.json()["categories"] == ["gas"]
        download = client.get(f"/api/states/{state_id}/photos/gas")
        assert download.content == image
        assert download.headers["x-taken-at"] == "2024-02-25T18:00:00"
        assert client.get(f"/api/states/{state_id}/photos/energy").status_code == 404

    def test_photo_for_missing_utility_rejected(self, client: TestClient) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])

        response = client.put(
            f"/api/states/{state_id}/photos/heat",
            files={"file": ("heat.jpg", _jpeg(), "image/jpeg")},
        )

        assert response.status_code == 400

    def test_oversized_photo_rejected(self, client: TestClient, monkeypatch) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])
        image = _jpeg()
        monkeypatch.setattr(settings, "MAX_PHOTO_BYTES", len(image) - 1)

        response = client.put(
            f"/api/states/{state_id}/photos/gas",
            files={"file": ("gas.jpg", image, "image/jpeg")},
        )

        assert response.status_code == 400
        assert "exceeds" in response.json()["error"]["message"]
        assert client.get(f"/api/states/{state_id}/photos").status_code == 404

    def test_not_an_image_rejected(self, client: TestClient) -> None:
        ids = _create_rent(client)
        state_id = _append_confirmed_state(client, ids["rent"])

        response = client.put(
            f"/api/states/{state_id}/photos/gas",
            files={"file": ("gas.jpg", b"plain text", "image/jpeg")},
        )

        assert response.status_code == 400


class TestParties:
    """Landlords, tenants and properties."""

    def test_property_includes_address(self, client: TestClient) -> None:
        ids = _create_rent(client)

        data = client.get(f"/api/properties/{ids['property']}").json()

        assert data["address"]["city"] == "Poznan"
        assert data["has_gas"] is True

    def test_replace_tenant(self, client: TestClient) -> None:
        ids = _create_rent(client)

        response = client.put(
            f"/api/tenants/{ids['tenant']}",
            json={
                "name": "Zofia",
                "surname": "Kaminska",
                "email": "zofia@example.com",
                "phone_number": "600100200",
                "address": {**ADDRESS, "city": "Lodz"},
            },
        )

        assert response.status_code == 200
        assert response.json()["surname"] == "Kaminska"

    def test_duplicate_email_rejected(self, client: TestClient) -> None:
        _create_rent(client)

        response = client.post(
            "/api/landlords/",
            json={"name": "Other", "surname": "Person", "email": "marek@example.com", "address": ADDRESS},
        )

        assert response.status_code == 400

    def test_company_requires_name(self, client: TestClient) -> None:
        response = client.post(
            "/api/landlords/",
            json={"is_company": True, "email": "firm@example.com", "address": ADDRESS},
        )

        assert response.status_code == 422
        assert response.json()["error"]["type"] == "request_validation_error"

    def test_lifecycle_listings(self, client: TestClient) -> None:
        ids = _create_rent(client)

        ongoing = client.get(f"/api/tenants/{ids['tenant']}/rents", params={"status": "ongoing"}).json()
        finished = client.get(
            f"/api/landlords/{ids['landlord']}/rents",
            params={"status": "finished", "as_of": "2024-06-01"},
        ).json()
        tenants = client.get(f"/api/landlords/{ids['landlord']}/tenants").json()
        between = client.get(
            f"/api/tenants/{ids['tenant']}/rents/between",
            params={"start": "2023-01-01", "end": "2024-01-01"},
        ).json()

        assert [r["id"] for r in ongoing] == [ids["rent"]]
        assert finished == []
        assert [t["id"] for t in tenants] == [ids["tenant"]]
        assert [r["id"] for r in between] == [ids["rent"]]

    def test_unconfirmed_states_of_landlord(self, client: TestClient) -> None:
        ids = _create_rent(client)
        response = client.post(
            f"/api/rents/{ids['rent']}/states",
            json={"cold_water": "15", "gas": "130", "energy": "600"},
        )

        unconfirmed = client.get(f"/api/landlords/{ids['landlord']}/states/unconfirmed").json()

        assert [s["id"] for s in unconfirmed] == [response.json()["id"]]


class TestSoftDelete:
    """Soft delete and restore through the API."""

    def test_property_round_trip(self, client: TestClient) -> None:
        ids = _create_rent(client)

        assert client.delete(f"/api/properties/{ids['property']}").json()["is_deleted"] is True
        assert client.get("/api/properties/").json() == []
        assert len(client.get("/api/properties/", params={"include_deleted": True}).json()) == 1
        assert client.get(f"/api/rents/{ids['rent']}").json()["is_deleted"] is False

        assert client.post(f"/api/properties/{ids['property']}/restore").json()["is_deleted"] is False

    def test_tenant_with_ongoing_rent(self, client: TestClient) -> None:
        ids = _create_rent(client)

        blocked = client.delete(f"/api/tenants/{ids['tenant']}", params={"as_of": "2024-06-01"})

        assert blocked.status_code == 400
        later = client.delete(f"/api/tenants/{ids['tenant']}", params={"as_of": "2100-01-01"})
        assert later.json()["is_deleted"] is True

    def test_landlord_with_property(self, client: TestClient) -> None:
        ids = _create_rent(client)

        assert client.delete(f"/api/landlords/{ids['landlord']}").status_code == 400


class TestErrors:
    """Error envelope."""

    @pytest.mark.parametrize(
        "path",
        ["/api/landlords/99", "/api/tenants/99", "/api/properties/99", "/api/rents/99", "/api/states/99"],
    )
    def test_not_found(self, client: TestClient, path: str) -> None:
        response = client.get(path)

        assert response.status_code == 404
        body = response.json()
        assert body["error"]["type"] == "not_found"
        assert body["path"] == path
        assert body["method"] == "GET"

    def test_correlation_id_echoed(self, client: TestClient) -> None:
        response = client.get("/api/invoices/1", headers={"X-Correlation-ID": "abc-123"})

        assert response.headers["X-Correlation-ID"] == "abc-123"
        assert response.json()["correlation_id"] == "abc-123"

    def test_reversed_date_range(self, client: TestClient) -> None:
        ids = _create_rent(client)

        response = client.get(
            f"/api/tenants/{ids['tenant']}/rents/between",
            params={"start": "2024-02-01", "end": "2024-01-01"},
        )

        assert response.status_code == 400
