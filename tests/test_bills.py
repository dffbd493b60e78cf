"""Tests for bill generation, saving and payment."""

from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient

from roombill.models.bill import Bill
from roombill.models.floor import Floor
from roombill.models.room import Room
from roombill.models.tenant import Tenant
from roombill.services.calculator import to_money


def _read(record_reading, room_id: int, water: str, electric: str, month: int = 1) -> None:
    record_reading(
        room_id, month, 2026,
        water_previous="0", water_current=water,
        electric_previous="0", electric_current=electric,
    )


class TestGenerateBills:
    """Tests for computing a period's bills."""

    def test_unit_billing(
        self, client: TestClient, create_room, create_tenant, record_reading
    ) -> None:
        """15 water and 150 electric units on a 3000 room come to 4500."""
        room = create_room("101")
        tenant = create_tenant(room["id"], name="Somchai")
        _read(record_reading, room["id"], "15", "150")

        response = client.get("/api/bills/generate/1/2026")
        assert response.status_code == 200
        data = response.json()
        assert data["errors"] == []
        assert len(data["bills"]) == 1

        bill = data["bills"][0]
        assert Decimal(bill["water_amount"]) == Decimal("270")
        assert Decimal(bill["electric_amount"]) == Decimal("1200")
        assert Decimal(bill["trash_fee"]) == Decimal("30")
        assert Decimal(bill["total_amount"]) == Decimal("4500")
        assert bill["invoice_no"] == "INV-6901-101"
        assert bill["tenant_id"] == tenant["id"]
        assert bill["tenant_name"] == "Somchai"
        assert bill["is_occupied"] is True
        assert Decimal(bill["water_current"]) == Decimal("15")

    def test_fixed_water(self, client: TestClient, create_room, record_reading) -> None:
        """A fixed water charge ignores the water meter."""
        room = create_room("101", water_calculation_type="fixed", water_fixed_amount="100")
        _read(record_reading, room["id"], "15", "150")

        bill = client.get("/api/bills/generate/1/2026").json()["bills"][0]
        assert Decimal(bill["water_amount"]) == Decimal("100")
        assert bill["water_rate"] is None
        assert bill["water_type"] == "fixed"
        assert Decimal(bill["total_amount"]) == Decimal("4330")

    def test_rates_come_from_settings(
        self, client: TestClient, create_room, record_reading
    ) -> None:
        """Saved rates replace the defaults."""
        client.post(
            "/api/settings/bulk",
            json={"settings": {"water_rate": "20", "electric_rate": "7", "trash_fee": "0"}},
        )
        room = create_room()
        _read(record_reading, room["id"], "10", "100")

        bill = client.get("/api/bills/generate/1/2026").json()["bills"][0]
        assert Decimal(bill["water_amount"]) == Decimal("200")
        assert Decimal(bill["electric_amount"]) == Decimal("700")
        assert Decimal(bill["trash_fee"]) == Decimal("0")
        assert Decimal(bill["total_amount"]) == Decimal("3900")

    def test_billable_rooms(
        self, client: TestClient, create_room, create_tenant, record_reading
    ) -> None:
        """Read rooms and occupied rooms are billed; vacant unread rooms are not."""
        read_vacant = create_room("101")
        occupied_unread = create_room("102")
        create_room("103")
        create_tenant(occupied_unread["id"])
        _read(record_reading, read_vacant["id"], "5", "50")

        bills = client.get("/api/bills/generate/1/2026").json()["bills"]
        assert sorted(b["room_number"] for b in bills) == ["101", "102"]

        unread = next(b for b in bills if b["room_number"] == "102")
        assert Decimal(unread["water_units"]) == Decimal("0")
        assert Decimal(unread["total_amount"]) == Decimal("3030")
        assert unread["water_current"] is None

        vacant = next(b for b in bills if b["room_number"] == "101")
        assert vacant["tenant_id"] is None
        assert vacant["is_occupied"] is False

    def test_unread_meter_is_zero_usage(
        self, client: TestClient, create_room, create_tenant, record_reading
    ) -> None:
        """A meter recorded as 0 is billed with no usage."""
        room = create_room()
        create_tenant(room["id"])
        record_reading(
            room["id"], 1, 2026,
            water_previous="40", water_current="0",
            electric_previous="400", electric_current="420",
        )
        bill = client.get("/api/bills/generate/1/2026").json()["bills"][0]
        assert Decimal(bill["water_units"]) == Decimal("0")
        assert Decimal(bill["electric_units"]) == Decimal("20")

    def test_negative_usage_is_billed_with_warning(
        self, client: TestClient, create_room, record_reading
    ) -> None:
        """A meter that went backwards is billed negative and flagged."""
        room = create_room()
        record_reading(
            room["id"], 1, 2026,
            water_previous="10", water_current="5",
            electric_previous="0", electric_current="10",
        )
        bill = client.get("/api/bills/generate/1/2026").json()["bills"][0]
        assert Decimal(bill["water_amount"]) == Decimal("-90")
        assert bill["warnings"] == ["negative water usage"]

    def test_misconfigured_room_is_reported(
        self, client: TestClient, test_db, create_room, record_reading
    ) -> None:
        """A room with an unknown calculation type fails alone."""
        good = create_room("101")
        floor = Floor(name="Annex", sort_order=9)
        test_db.add(floor)
        test_db.flush()
        bad = Room(
            room_number="999",
            room_price=Decimal("2500"),
            water_calculation_type="per_person",
            electric_calculation_type="unit",
            floor_id=floor.id,
        )
        test_db.add(bad)
        test_db.commit()
        _read(record_reading, good["id"], "1", "1")
        _read(record_reading, bad.id, "1", "1")

        data = client.get("/api/bills/generate/1/2026").json()
        assert [b["room_number"] for b in data["bills"]] == ["101"]
        assert len(data["errors"]) == 1
        assert data["errors"][0]["room_number"] == "999"
        assert "per_person" in data["errors"][0]["detail"]

    def test_generate_does_not_save(
        self, client: TestClient, test_db, create_room, record_reading
    ) -> None:
        """Generating is a preview until the bills are saved."""
        room = create_room()
        _read(record_reading, room["id"], "1", "1")
        client.get("/api/bills/generate/1/2026")
        assert test_db.query(Bill).count() == 0

    def test_invalid_period(self, client: TestClient) -> None:
        """Month 13 is rejected."""
        response = client.get("/api/bills/generate/13/2026")
        assert response.status_code == 422
        assert response.json()["detail"] == "Invalid request"


class TestPersistBills:
    """Tests for generating and saving a period's bills."""

    def test_persist_and_list(
        self, client: TestClient, create_room, create_tenant, record_reading
    ) -> None:
        """Saved bills are listed for the period and keep the tenant."""
        room = create_room("101")
        tenant = create_tenant(room["id"])
        _read(record_reading, room["id"], "15", "150")

        response = client.post("/api/bills/generate/1/2026")
        assert response.status_code == 200
        saved = response.json()
        assert len(saved) == 1
        assert Decimal(saved[0]["total_amount"]) == Decimal("4500")
        assert saved[0]["tenant_id"] == tenant["id"]

        listed = client.get("/api/bills/1/2026").json()
        assert [b["invoice_no"] for b in listed] == ["INV-6901-101"]
        assert listed[0]["room_number"] == "101"

    def test_regenerate_replaces_bills(
        self, client: TestClient, test_db, create_room, record_reading
    ) -> None:
        """Generating again overwrites the period's bills."""
        room = create_room()
        _read(record_reading, room["id"], "15", "150")
        client.post("/api/bills/generate/1/2026")
        _read(record_reading, room["id"], "20", "150")
        client.post("/api/bills/generate/1/2026")

        bills = test_db.query(Bill).all()
        assert len(bills) == 1
        assert bills[0].water_amount == Decimal("360")


    def test_saved_rate_reproduces_amount(
        self, client: TestClient, test_db, create_room, record_reading
    ) -> None:
        """A saved bill keeps its rate exactly, so units x rate gives back the amount."""
        client.put("/api/settings/water_rate", json={"value": "4.375"})
        client.put("/api/settings/electric_rate", json={"value": "3.3333"})
        room = create_room()
        _read(record_reading, room["id"], "10", "7")
        client.post("/api/bills/generate/1/2026")

        bill = test_db.query(Bill).one()
        assert bill.water_rate == Decimal("4.375")
        assert bill.water_amount == Decimal("43.75")
        assert to_money(bill.water_units * bill.water_rate) == bill.water_amount
        assert bill.electric_rate == Decimal("3.3333")
        assert to_money(bill.electric_units * bill.electric_rate) == bill.electric_amount


class TestSaveBill:
    """Tests for saving bills by hand."""

    def _payload(self, room_id: int, **overrides) -> dict:
        payload = {
            "room_id": room_id,
            "bill_month": 1,
            "bill_year": 2026,
            "room_price": "3000",
            "water_units": "15",
            "water_rate": "18",
            "water_amount": "270",
            "electric_units": "150",
            "electric_rate": "8",
            "electric_amount": "1200",
            "trash_fee": "30",
        }
        payload.update(overrides)
        return payload

    def test_total_is_computed_when_missing(self, client: TestClient, create_room) -> None:
        """Leaving the total out has it computed from the line items."""
        room = create_room("101")
        response = client.post("/api/bills/", json=self._payload(room["id"]))
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["total_amount"]) == Decimal("4500")
        assert data["invoice_no"] == "INV-6901-101"
        assert data["is_paid"] is False

    def test_matching_total_is_accepted(self, client: TestClient, create_room) -> None:
        """A total equal to the line items is saved."""
        room = create_room()
        response = client.post(
            "/api/bills/",
            json=self._payload(room["id"], total_amount="4500.00"),
        )
        assert response.status_code == 201

    def test_wrong_total_is_rejected(
        self, client: TestClient, test_db, create_room
    ) -> None:
        """A total that does not add up is refused and nothing is saved."""
        room = create_room()
        response = client.post(
            "/api/bills/",
            json=self._payload(room["id"], total_amount="5000"),
        )
        assert response.status_code == 422
        assert response.json()["detail"] == "Bill total does not match its line items"
        assert test_db.query(Bill).count() == 0

    def test_second_save_replaces(self, client: TestClient, test_db, create_room) -> None:
        """Saving the same period again replaces the bill."""
        room = create_room()
        first = client.post("/api/bills/", json=self._payload(room["id"]))
        second = client.post(
            "/api/bills/",
            json=self._payload(
                room["id"],
                other_amount="100",
                other_description="Key replacement",
                invoice_no="CUSTOM-1",
            ),
        )
        assert first.status_code == 201
        assert second.status_code == 200
        assert first.json()["id"] == second.json()["id"]
        data = second.json()
        assert Decimal(data["total_amount"]) == Decimal("4600")
        assert data["other_description"] == "Key replacement"
        assert data["invoice_no"] == "CUSTOM-1"
        assert test_db.query(Bill).count() == 1

    def test_unknown_room(self, client: TestClient) -> None:
        """Saving for a missing room is a not-found error."""
        response = client.post("/api/bills/", json=self._payload(9999))
        assert response.status_code == 404

    def test_unknown_calculation_type(self, client: TestClient, create_room) -> None:
        """Only unit and fixed are accepted."""
        room = create_room()
        response = client.post(
            "/api/bills/",
            json=self._payload(room["id"], water_type="per_person"),
        )
        assert response.status_code == 422

    def test_line_items_are_stored_in_cents(
        self, client: TestClient, create_room
    ) -> None:
        """Sub-cent line items are rounded before the total is taken, so it still adds up."""
        room = create_room()
        response = client.post(
            "/api/bills/",
            json=self._payload(
                room["id"],
                room_price="0",
                water_amount="0.015",
                electric_amount="0.015",
                trash_fee="0",
            ),
        )
        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["water_amount"]) == Decimal("0.02")
        assert Decimal(data["electric_amount"]) == Decimal("0.02")
        assert Decimal(data["total_amount"]) == Decimal("0.04")

        report = client.get("/api/audit/consistency").json()
        assert report["is_consistent"] is True

    def test_total_checked_against_rounded_items(
        self, client: TestClient, create_room
    ) -> None:
        """A total matching only the unrounded items is refused."""
        room = create_room()
        response = client.post(
            "/api/bills/",
            json=self._payload(
                room["id"],
                room_price="0",
                water_amount="0.015",
                electric_amount="0.015",
                trash_fee="0",
                total_amount="0.03",
            ),
        )
        assert response.status_code == 422


class TestBillLookup:
    """Tests for reading and paying bills."""

    def test_get_and_pay(self, client: TestClient, create_room, record_reading) -> None:
        """A saved bill can be fetched and marked paid."""
        room = create_room()
        _read(record_reading, room["id"], "15", "150")
        bill_id = client.post("/api/bills/generate/1/2026").json()[0]["id"]

        fetched = client.get(f"/api/bills/{bill_id}")
        assert fetched.status_code == 200
        assert fetched.json()["is_paid"] is False

        paid = client.put(f"/api/bills/{bill_id}/pay")
        assert paid.status_code == 200
        assert paid.json()["is_paid"] is True
        assert paid.json()["paid_date"] == date.today().isoformat()

    def test_missing_bill(self, client: TestClient) -> None:
        """Unknown bills are not found."""
        assert client.get("/api/bills/9999").status_code == 404
        assert client.put("/api/bills/9999/pay").status_code == 404

    def test_empty_period(self, client: TestClient) -> None:
        """A period without bills lists nothing."""
        response = client.get("/api/bills/2/2026")
        assert response.status_code == 200
        assert response.json() == []


class TestConsistencyAudit:
    """Tests for the consistency report."""

    def test_clean_data(self, client: TestClient, create_room, create_tenant) -> None:
        """Data written through the API is consistent."""
        room = create_room()
        create_tenant(room["id"])
        client.post("/api/bills/generate/1/2026")

        report = client.get("/api/audit/consistency").json()
        assert report["is_consistent"] is True
        assert report["rooms_with_multiple_tenants"] == []
        assert report["bills_with_wrong_total"] == []

    def test_detects_problems(self, client: TestClient, test_db, create_room) -> None:
        """Doubly-occupied rooms and bad totals written behind the API are reported."""
        room = create_room("101")
        first = Tenant(name="A", room_id=room["id"], is_active=True)
        second = Tenant(name="B", room_id=room["id"], is_active=True)
        test_db.add_all([first, second])
        test_db.add(
            Bill(
                room_id=room["id"],
                bill_month=1,
                bill_year=2026,
                room_price=Decimal("3000"),
                trash_fee=Decimal("30"),
                total_amount=Decimal("9999"),
            )
        )
        test_db.commit()

        report = client.get("/api/audit/consistency").json()
        assert report["is_consistent"] is False
        conflict = report["rooms_with_multiple_tenants"][0]
        assert conflict["room_number"] == "101"
        assert conflict["tenant_ids"] == sorted([first.id, second.id])
        mismatch = report["bills_with_wrong_total"][0]
        assert Decimal(mismatch["total_amount"]) == Decimal("9999")
        assert Decimal(mismatch["expected_total"]) == Decimal("3030")
