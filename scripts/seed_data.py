"""Seed script to populate the database with sample data."""

from decimal import Decimal

from roombill.core.database import Base, SessionLocal, engine
from roombill.models.bill import Bill  # noqa: F401
from roombill.models.enums import CalculationType, SettingKey
from roombill.models.floor import Floor
from roombill.models.meter_reading import MeterReading
from roombill.models.room import Room
from roombill.models.setting import Setting
from roombill.models.tenant import Tenant
from roombill.services.billing import persist_generated_bills

# (year, month) periods with readings, oldest first
PERIODS = [(2025, month) for month in range(5, 13)] + [(2026, 1)]

TENANTS = {
    "101": ("Somchai Jaidee", "0812345678"),
    "102": ("Malee Srisuk", "0823456789"),
    "201": ("Anan Wongsa", "0834567890"),
    "203": ("Pranee Thongdee", "0845678901"),
}


def seed_database() -> None:
    """Seed the database with sample data."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # Check if data already exists
        if db.query(Floor).first():
            print("Database already has data. Skipping seed.")
            return

        print("Seeding database...")

        db.add_all(
            [
                Setting(setting_key=SettingKey.WATER_RATE.value, setting_value="18"),
                Setting(setting_key=SettingKey.ELECTRIC_RATE.value, setting_value="8"),
                Setting(setting_key=SettingKey.TRASH_FEE.value, setting_value="30"),
            ]
        )

        floors = [Floor(name=f"Floor {n}", sort_order=n) for n in (1, 2)]
        db.add_all(floors)
        db.flush()

        rooms: list[Room] = []
        for floor_no, floor in enumerate(floors, start=1):
            for n in range(1, 4):
                number = f"{floor_no}0{n}"
                fixed_water = number.endswith("3")
                water_type = CalculationType.FIXED if fixed_water else CalculationType.UNIT
                rooms.append(
                    Room(
                        room_number=number,
                        room_price=Decimal("3000") + Decimal(500 * (floor_no - 1)),
                        water_calculation_type=water_type.value,
                        water_fixed_amount=Decimal("100") if fixed_water else Decimal("0"),
                        electric_calculation_type=CalculationType.UNIT.value,
                        floor_id=floor.id,
                    )
                )
        db.add_all(rooms)
        db.flush()

        print(f"Created {len(floors)} floors and {len(rooms)} rooms")

        for room in rooms:
            if room.room_number in TENANTS:
                name, phone = TENANTS[room.room_number]
                db.add(Tenant(name=name, phone=phone, room_id=room.id, is_active=True))
        db.flush()

        print(f"Created {len(TENANTS)} tenants")

        # Continuous readings: each period starts where the last one ended
        count = 0
        for index, room in enumerate(rooms):
            water = Decimal(100 * index)
            electric = Decimal(1000 * index)
            for step, (year, month) in enumerate(PERIODS):
                water_used = Decimal(8 + (step + index) % 6)
                electric_used = Decimal(90 + 15 * ((step * 3 + index) % 5))
                db.add(
                    MeterReading(
                        room_id=room.id,
                        reading_month=month,
                        reading_year=year,
                        water_previous=water,
                        water_current=water + water_used,
                        electric_previous=electric,
                        electric_current=electric + electric_used,
                    )
                )
                water += water_used
                electric += electric_used
                count += 1
        db.commit()

        print(f"Created {count} readings ({len(PERIODS)} months x {len(rooms)} rooms)")

        for year, month in PERIODS:
            bills, result = persist_generated_bills(db, month, year)
            for error in result.errors:
                print(f"Room {error.room_number} not billed for {month}/{year}: {error.detail}")
            print(f"Saved {len(bills)} bills for {month}/{year}")

        print("\nSeed data created successfully!")
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
