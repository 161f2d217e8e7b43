"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - 4 sample customers
  - 8 catalog services (3 of them emergency services)
  - 10 sample partners around Delhi and Ahmedabad (mix of approval states,
    one without a location)
"""

import asyncio

from sqlalchemy import text

from roadside.domain.entities import GeoPoint
from roadside.domain.enums import ApprovalStatus, BusinessType, ServiceCategory
from roadside.infrastructure.database import async_session_factory, engine
from roadside.infrastructure.geo_query import make_point
from roadside.infrastructure.models import PartnerModel, ServiceModel, UserModel


USERS = [
    {"name": "Aarav Sharma", "email": "aarav@example.com", "phone": "9810000001"},
    {"name": "Priya Patel", "email": "priya@example.com", "phone": "9810000002"},
    {"name": "Rohan Mehta", "email": "rohan@example.com", "phone": "9810000003"},
    {"name": "Sneha Gupta", "email": "sneha@example.com", "phone": "9810000004"},
]

SERVICES = [
    {"name": "Puncture Repair", "category": ServiceCategory.REPAIR},
    {"name": "Wheel Alignment", "category": ServiceCategory.MAINTENANCE},
    {"name": "General Service", "category": ServiceCategory.MAINTENANCE},
    {"name": "Battery Replacement", "category": ServiceCategory.BATTERY},
    {"name": "Car Wash", "category": ServiceCategory.CLEANING},
    {"name": "Breakdown Towing", "category": ServiceCategory.EMERGENCY},
    {"name": "Flat Tire Roadside Help", "category": ServiceCategory.EMERGENCY},
    {"name": "Accident Recovery", "category": ServiceCategory.EMERGENCY},
]

# service indexes refer to SERVICES
PARTNERS = [
    # Delhi
    {"shop": "Connaught Tyres", "owner": "Vikram Singh", "mobile": "9876500001",
     "type": BusinessType.TIRE_SHOP, "point": (28.6315, 77.2167), "rating": 4.6,
     "status": ApprovalStatus.APPROVED, "services": [0, 1, 6]},
    {"shop": "Karol Bagh Motors", "owner": "Ananya Reddy", "mobile": "9876500002",
     "type": BusinessType.GARAGE, "point": (28.6519, 77.1909), "rating": 4.2,
     "status": ApprovalStatus.APPROVED, "services": [2, 3]},
    {"shop": "Rohini Towing", "owner": "Karan Joshi", "mobile": "9876500003",
     "type": BusinessType.TOWING, "point": (28.7041, 77.1025), "rating": 4.8,
     "status": ApprovalStatus.APPROVED, "services": [5, 7]},
    {"shop": "Lajpat Auto Care", "owner": "Meera Nair", "mobile": "9876500004",
     "type": BusinessType.GARAGE, "point": (28.5677, 77.2433), "rating": 3.9,
     "status": ApprovalStatus.PENDING, "services": [0, 2]},
    {"shop": "Saket Battery Hub", "owner": "Arjun Kumar", "mobile": "9876500005",
     "type": BusinessType.BATTERY_SWAP, "point": (28.5245, 77.2066), "rating": 4.4,
     "status": ApprovalStatus.APPROVED, "services": [3]},
    # Ahmedabad
    {"shop": "Navrangpura Tyre World", "owner": "Diya Iyer", "mobile": "9876500006",
     "type": BusinessType.TIRE_SHOP, "point": (23.0365, 72.5611), "rating": 4.7,
     "status": ApprovalStatus.APPROVED, "services": [0, 1, 6]},
    {"shop": "Lal Darwaja Garage", "owner": "Harsh Desai", "mobile": "9876500007",
     "type": BusinessType.GARAGE, "point": (23.0225, 72.5714), "rating": 4.0,
     "status": ApprovalStatus.APPROVED, "services": [2, 5]},
    {"shop": "Maninagar Car Spa", "owner": "Nisha Shah", "mobile": "9876500008",
     "type": BusinessType.CAR_WASH, "point": (22.9962, 72.6030), "rating": 4.1,
     "status": ApprovalStatus.SUSPENDED, "services": [4]},
    {"shop": "SG Highway Rescue", "owner": "Jay Patel", "mobile": "9876500009",
     "type": BusinessType.EMERGENCY_SERVICE, "point": (23.0504, 72.5000),
     "rating": 4.9, "status": ApprovalStatus.APPROVED, "services": [5, 6, 7],
     "emergency": True},
    # Registered but never set a shop location
    {"shop": "Satellite Auto Point", "owner": "Riya Mehta", "mobile": "9876500010",
     "type": BusinessType.GARAGE, "point": None, "rating": 3.5,
     "status": ApprovalStatus.APPROVED, "services": [2]},
]


async def seed():
    async with async_session_factory() as session:
        # Check if already seeded
        result = await session.execute(text("SELECT count(*) FROM partners"))
        if result.scalar() > 0:
            print("Database already seeded. Skipping.")
            return

        # ── Users ─────────────────────────────────────────────────────
        session.add_all([UserModel(**u) for u in USERS])
        print(f"  Created {len(USERS)} users")

        # ── Services ──────────────────────────────────────────────────
        service_models = [
            ServiceModel(name=s["name"], category=s["category"], is_active=True)
            for s in SERVICES
        ]
        session.add_all(service_models)
        await session.flush()
        print(f"  Created {len(service_models)} services")

        # ── Partners ──────────────────────────────────────────────────
        for p in PARTNERS:
            point = GeoPoint(*p["point"]) if p["point"] else None
            partner = PartnerModel(
                shop_name=p["shop"],
                owner_name=p["owner"],
                mobile_number=p["mobile"],
                shop_address=f"{p['shop']}, India",
                business_type=p["type"],
                latitude=point.latitude if point else None,
                longitude=point.longitude if point else None,
                location=make_point(point) if point else None,
                approval_status=p["status"],
                is_online=True,
                rating=p["rating"],
                is_emergency_service=p.get("emergency", False),
                services=[service_models[i] for i in p["services"]],
            )
            session.add(partner)
        await session.flush()
        print(f"  Created {len(PARTNERS)} partners")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
