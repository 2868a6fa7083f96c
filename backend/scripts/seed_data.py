"""Seed the database with an admin account and a small room inventory.

Creates the first ADMIN (staff accounts can only be created by an admin),
a handful of amenities, three room types and a floor of rooms.

Run from the ``backend`` directory:
    python -m scripts.seed_data
"""

import asyncio
import os
import sys
from decimal import Decimal
from pathlib import Path

# Add backend to path so imports work when run as a script
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from sqlalchemy import select

from hotel_booking.auth.passwords import hash_password
from hotel_booking.database import Base, async_session_factory, engine
from hotel_booking.models import Amenity, Room, RoomType, User

ADMIN = {
    "email": os.environ.get("SEED_ADMIN_EMAIL", "admin@example.com"),
    "password": os.environ.get("SEED_ADMIN_PASSWORD", "admin1234"),
    "first_name": "Hotel",
    "last_name": "Admin",
}

AMENITIES = {
    "wifi": "Complimentary high-speed wifi",
    "ac": "Individually controlled air conditioning",
    "minibar": "Stocked minibar",
    "bathtub": "Full-size bathtub",
    "balcony": "Private balcony",
    "sea_view": "Sea-facing windows",
}

# name -> (description, amenity names, nightly rate, room numbers)
ROOM_TYPES = {
    "Standard": (
        "Queen bed, shower room, city view.",
        ["wifi", "ac"],
        Decimal("100.00"),
        ["101", "102", "103", "104"],
    ),
    "Deluxe": (
        "King bed, bathtub and balcony.",
        ["wifi", "ac", "minibar", "bathtub", "balcony"],
        Decimal("180.00"),
        ["201", "202", "203"],
    ),
    "Suite": (
        "Separate living room with sea view.",
        ["wifi", "ac", "minibar", "bathtub", "balcony", "sea_view"],
        Decimal("320.00"),
        ["301", "302"],
    ),
}


async def seed() -> None:
    """Create tables if missing and insert seed rows that do not exist yet.

    Safe to run repeatedly: existing rows (matched by e-mail, name or room
    number) are left untouched.
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with async_session_factory() as session:
        # ------------------------------------------------------------------
        # 1. Admin account
        # ------------------------------------------------------------------
        result = await session.execute(select(User).where(User.email == ADMIN["email"]))
        admin = result.scalar_one_or_none()
        if admin is None:
            admin = User(
                email=ADMIN["email"],
                hashed_password=hash_password(ADMIN["password"]),
                first_name=ADMIN["first_name"],
                last_name=ADMIN["last_name"],
                role="ADMIN",
                status="ACTIVE",
            )
            session.add(admin)
            await session.flush()
            print(f"Created admin: {admin.email} (id={admin.id})")
        else:
            print(f"Admin '{admin.email}' already exists, keeping it")

        # ------------------------------------------------------------------
        # 2. Amenities
        # ------------------------------------------------------------------
        amenities: dict[str, Amenity] = {}
        for name, description in AMENITIES.items():
            result = await session.execute(select(Amenity).where(Amenity.name == name))
            amenity = result.scalar_one_or_none()
            if amenity is None:
                amenity = Amenity(name=name, description=description)
                session.add(amenity)
            amenities[name] = amenity
        await session.flush()

        # ------------------------------------------------------------------
        # 3. Room types and rooms
        # ------------------------------------------------------------------
        room_count = 0
        for type_name, (description, amenity_names, rate, numbers) in ROOM_TYPES.items():
            result = await session.execute(select(RoomType).where(RoomType.name == type_name))
            room_type = result.scalar_one_or_none()
            if room_type is None:
                room_type = RoomType(
                    name=type_name,
                    description=description,
                    amenities=[amenities[a] for a in amenity_names],
                )
                session.add(room_type)
                await session.flush()

            for number in numbers:
                result = await session.execute(select(Room).where(Room.room_number == number))
                if result.scalar_one_or_none() is not None:
                    continue
                session.add(
                    Room(
                        room_number=number,
                        price=rate,
                        status="AVAILABLE",
                        room_type_id=room_type.id,
                        created_by=admin.id,
                    )
                )
                room_count += 1

        await session.commit()

    print(f"Created {room_count} rooms")
    print(f"Log in at /api/v1/auth/login as {ADMIN['email']}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed())
