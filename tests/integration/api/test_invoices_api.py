"""API tests for the invoice endpoints

Runs the FastAPI app against an in-memory SQLite database with
authentication disabled, so every request belongs to AUTH_DEV_USER_ID.
"""

from datetime import datetime
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient

from src.depends import get_session
from src.domain.invoice import Invoice
from tests.integration.conftest import IntegrationConfig

CURRENT_MONTH = datetime.now().strftime("%Y%m")


def invoice_payload(invoice_number, **overrides):
    payload = {
        "invoice_number": invoice_number,
        "issue_date": "2024-06-10",
        "due_date": "2024-06-25",
        "client": {
            "name": "Acme Traders",
            "address": "12 MG Road, Kochi",
            "gstin": "32aaaca1234a1z5",
        },
        "items": [
            {"description": "Social media management", "quantity": 2, "unit_price": "100"},
            {"description": "Ad creatives", "quantity": 1, "unit_price": "50"},
        ],
        "discount_type": "fixed",
        "discount_value": "30",
        "tax_mode": "IGST",
        "tax_rate": "18",
    }
    payload.update(overrides)
    return payload


async def create_invoice(http_client, invoice_number="INV2024060004", **overrides):
    response = await http_client.post("/api/invoices", json=invoice_payload(invoice_number, **overrides))
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
class TestCreateInvoice:
    async def test_create_invoice(self, client):
        """
        Given: A valid invoice form
        When: POST /api/invoices
        Then: 201 with recomputed totals, normalized GSTIN and the default payment info
        """
        # Act
        data = await create_invoice(client)

        # Assert
        assert data["invoice_number"] == "INV2024060004"
        assert Decimal(data["subtotal"]) == Decimal("250.00")
        assert Decimal(data["total"]) == Decimal("259.60")
        assert data["client"]["gstin"] == "32AAACA1234A1Z5"
        assert [item["description"] for item in data["items"]] == [
            "Social media management",
            "Ad creatives",
        ]
        assert data["payment_info"]["account_name"] == "PRIMARKETLUBE LLP"
        assert data["tax_breakdown"][0]["label"] == "IGST"

    async def test_validation_lists_every_problem(self, client):
        response = await client.post(
            "/api/invoices",
            json=invoice_payload("", client={"name": ""}, items=[], due_date="2024-06-01"),
        )

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_FAILED"
        assert [detail["field"] for detail in error["details"]] == [
            "invoice_number",
            "client.name",
            "due_date",
            "items",
        ]

    async def test_duplicate_number_is_rejected(self, client):
        await create_invoice(client)

        response = await client.post("/api/invoices", json=invoice_payload("INV2024060004"))

        assert response.status_code == 422
        assert "already in use" in response.json()["error"]["message"]

    async def test_schema_errors_use_error_envelope(self, client):
        response = await client.post("/api/invoices", json=invoice_payload("INV1", tax_rate="150"))

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_FAILED"
        assert error["details"][0]["field"] == "tax_rate"


@pytest.mark.asyncio
class TestListInvoices:
    async def test_list_and_search(self, client):
        await create_invoice(client, "INV2024060001")
        await create_invoice(client, "INV2024060002", client={"name": "Blue Ocean Foods"})

        everything = (await client.get("/api/invoices")).json()
        by_name = (await client.get("/api/invoices", params={"query": "OCEAN"})).json()
        by_number = (await client.get("/api/invoices", params={"query": "060001"})).json()

        assert everything["count"] == 2
        assert everything["strategy"] == "joined"
        assert [invoice["invoice_number"] for invoice in by_name["invoices"]] == ["INV2024060002"]
        assert [invoice["invoice_number"] for invoice in by_number["invoices"]] == ["INV2024060001"]

    async def test_filters(self, client):
        await create_invoice(client, "INV2024060001", status="Paid")
        await create_invoice(client, "INV2024060002", payment_type="Advance")

        paid = (await client.get("/api/invoices", params={"status": "Paid"})).json()
        advance = (await client.get("/api/invoices", params={"payment_type": "Advance", "status": "All"})).json()
        outside = (await client.get("/api/invoices", params={"start_date": "2024-07-01"})).json()

        assert [invoice["invoice_number"] for invoice in paid["invoices"]] == ["INV2024060001"]
        assert [invoice["invoice_number"] for invoice in advance["invoices"]] == ["INV2024060002"]
        assert outside["count"] == 0

    async def test_pagination(self, client):
        for sequence in range(1, 4):
            await create_invoice(client, f"INV202406000{sequence}")

        page = (await client.get("/api/invoices", params={"page": 2, "page_size": 2})).json()

        assert page["count"] == 3
        assert page["total_pages"] == 2
        assert page["current_page"] == 2
        assert len(page["invoices"]) == 1

    async def test_invalid_status_filter(self, client):
        response = await client.get("/api/invoices", params={"status": "Overdue"})

        assert response.status_code == 422


@pytest.mark.asyncio
class TestEditInvoice:
    async def test_get_invoice(self, client):
        created = await create_invoice(client)

        response = await client.get(f"/api/invoices/{created['id']}")

        assert response.status_code == 200
        assert response.json()["client"]["name"] == "Acme Traders"

    async def test_get_missing_invoice(self, client):
        response = await client.get("/api/invoices/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "INVOICE_NOT_FOUND"

    async def test_update_invoice(self, client):
        """
        Given: A saved invoice with two items
        When: It is saved with the first item edited and the second removed
        Then: The item keeps its ID and totals are recomputed
        """
        # Arrange
        created = await create_invoice(client)
        first_item = created["items"][0]
        payload = invoice_payload(
            "INV2024060004",
            client={"name": "Acme Traders Pvt Ltd", "address": "New address"},
            items=[{"id": first_item["id"], "description": "Retainer", "quantity": 1, "unit_price": "1000"}],
            discount_value="0",
        )

        # Act
        response = await client.put(f"/api/invoices/{created['id']}", json=payload)

        # Assert
        assert response.status_code == 200, response.text
        data = response.json()
        assert data["client"]["name"] == "Acme Traders Pvt Ltd"
        assert data["client"]["id"] == created["client"]["id"]
        assert [item["id"] for item in data["items"]] == [first_item["id"]]
        assert Decimal(data["total"]) == Decimal("1180.00")

        stored = (await client.get(f"/api/invoices/{created['id']}")).json()
        assert [item["description"] for item in stored["items"]] == ["Retainer"]

    async def test_toggle_status_and_remark(self, client):
        created = await create_invoice(client)

        toggled = await client.post(f"/api/invoices/{created['id']}/status/toggle")
        remarked = await client.patch(f"/api/invoices/{created['id']}/remark", json={"remark": "Paid by NEFT"})
        reset = await client.patch(f"/api/invoices/{created['id']}/status", json={"status": "Unpaid"})

        assert toggled.json()["status"] == "Paid"
        assert remarked.json()["remark"] == "Paid by NEFT"
        assert remarked.json()["status"] == "Paid"
        assert reset.json()["status"] == "Unpaid"

    async def test_inline_edits_of_invoice_sharing_its_number(self, client, db_session):
        """
        Given: Two stored invoices carrying the same number
        When: The status of one is toggled and its remark edited
        Then: Both edits succeed and the shared number is left alone
        """
        # Arrange
        first = await create_invoice(client, "INV2024060001")
        second = await create_invoice(client, "INV2024060002")
        stored = await db_session.get(Invoice, second["id"])
        stored.invoice_number = "INV2024060001"
        await db_session.commit()

        # Act
        toggled = await client.post(f"/api/invoices/{first['id']}/status/toggle")
        remarked = await client.patch(f"/api/invoices/{first['id']}/remark", json={"remark": "Cheque"})

        # Assert
        assert toggled.status_code == 200, toggled.text
        assert toggled.json()["status"] == "Paid"
        assert remarked.status_code == 200, remarked.text
        assert remarked.json()["remark"] == "Cheque"
        assert remarked.json()["invoice_number"] == "INV2024060001"

    async def test_duplicate_invoice(self, client):
        created = await create_invoice(client, f"INV{CURRENT_MONTH}0004")

        response = await client.post(f"/api/invoices/{created['id']}/duplicate")

        assert response.status_code == 201
        data = response.json()
        assert data["number_verified_unique"] is True
        assert data["invoice"]["invoice_number"] == f"INV{CURRENT_MONTH}0005"
        assert data["invoice"]["id"] != created["id"]
        assert Decimal(data["invoice"]["total"]) == Decimal("259.60")

        listing = (await client.get("/api/invoices")).json()
        assert listing["count"] == 2

    async def test_delete_invoice(self, client):
        created = await create_invoice(client)

        deleted = await client.delete(f"/api/invoices/{created['id']}")
        missing = await client.get(f"/api/invoices/{created['id']}")

        assert deleted.status_code == 204
        assert missing.status_code == 404


@pytest.mark.asyncio
class TestInvoiceNumbersAndTotals:
    async def test_next_number_continues_sequence(self, client):
        await create_invoice(client, f"INV{CURRENT_MONTH}0004")

        data = (await client.get("/api/invoices/next-number")).json()

        assert data == {"invoice_number": f"INV{CURRENT_MONTH}0005", "strategy": "sequential"}

    async def test_number_availability(self, client):
        created = await create_invoice(client)

        taken = (await client.get("/api/invoices/number-availability", params={"invoice_number": "INV2024060004"})).json()
        own = (
            await client.get(
                "/api/invoices/number-availability",
                params={"invoice_number": "INV2024060004", "exclude_id": created["id"]},
            )
        ).json()

        assert taken["unique"] is False
        assert own["unique"] is True

    async def test_calculate(self, client):
        response = await client.post(
            "/api/invoices/calculate", json=invoice_payload("", tax_mode="CGST-SGST")
        )

        data = response.json()
        assert Decimal(data["total"]) == Decimal("259.60")
        assert [line["label"] for line in data["tax_breakdown"]] == ["CGST", "SGST"]


@pytest.mark.asyncio
class TestPdfExport:
    async def test_download_saved_invoice(self, client):
        created = await create_invoice(client)

        response = await client.get(f"/api/invoices/{created['id']}/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="Invoice-INV2024060004.pdf"'
        assert response.content.startswith(b"%PDF")

    async def test_export_draft(self, client):
        response = await client.post("/api/invoices/pdf", json=invoice_payload("INV2024069999"))

        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")

    async def test_invalid_draft(self, client):
        response = await client.post("/api/invoices/pdf", json=invoice_payload("INV1", items=[]))

        assert response.status_code == 422


@pytest.mark.asyncio
class TestAuthentication:
    async def test_requests_without_session_are_rejected(self, db_session):
        """
        Given: Authentication is enabled and no bearer token is sent
        When: GET /api/invoices
        Then: 401 NO_ACTIVE_SESSION
        """
        # Arrange
        from src.api.app import create_app

        class AuthEnabledConfig(IntegrationConfig):
            AUTH_DISABLED = False
            AUTH_URL = "http://auth.invalid"

        app = create_app(AuthEnabledConfig)

        async def override_get_session():
            yield db_session

        app.dependency_overrides[get_session] = override_get_session

        # Act
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            listing = await ac.get("/api/invoices")
            sign_out = await ac.post("/api/auth/sign-out")

        # Assert
        assert listing.status_code == 401
        assert listing.json()["error"]["code"] == "NO_ACTIVE_SESSION"
        assert sign_out.status_code == 401

    async def test_sign_out_drops_workspace(self, app, client):
        await client.get("/api/invoices")
        assert "user_integration" in app.state.workspaces

        response = await client.post("/api/auth/sign-out")

        assert response.status_code == 204
        assert "user_integration" not in app.state.workspaces
