"""
Principal Provisioning

Students and faculty are never created over HTTP. This module creates the
tables and inserts demo principals; existing identifiers are skipped.

Run with: python -m campus_events.db.seed_data
      or: campus-events-seed
"""
import asyncio
from typing import Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_events.core.config import settings
from campus_events.core.database import AsyncSessionLocal, init_db, close_db
from campus_events.core.security import get_password_hash
from campus_events.models.principal import Faculty, PrincipalRole, Student


DEMO_STUDENTS: List[Dict] = [
    {
        "roll_number": "21CS001",
        "registration_number": "REG2021CS001",
        "name": "Ananya Sharma",
        "birth_date": "2003-05-14",
        "department": "CSE",
        "email": "ananya.sharma@campus.edu",
        "phone": "9876500001",
        "nationality": "Indian",
    },
    {
        "roll_number": "21CS002",
        "registration_number": "REG2021CS002",
        "name": "Rahul Verma",
        "birth_date": "2003-09-02",
        "department": "CSE",
        "email": "rahul.verma@campus.edu",
        "phone": "9876500002",
        "nationality": "Indian",
    },
    {
        "roll_number": "21EC014",
        "registration_number": "REG2021EC014",
        "name": "Meera Iyer",
        "birth_date": "2002-12-21",
        "department": "ECE",
        "email": "meera.iyer@campus.edu",
        "phone": "9876500003",
        "nationality": "Indian",
    },
]

DEMO_FACULTY: List[Dict] = [
    {
        "faculty_id": "FAC-CSE-01",
        "name": "Dr. Suresh Kumar",
        "department": "CSE",
        "email": "suresh.kumar@campus.edu",
        "phone": "9876511001",
        "designation": "Associate Professor",
        "password": "faculty123",
        "role": PrincipalRole.FACULTY,
    },
    {
        "faculty_id": "FAC-ECE-01",
        "name": "Dr. Priya Nair",
        "department": "ECE",
        "email": "priya.nair@campus.edu",
        "phone": "9876511002",
        "designation": "Assistant Professor",
        "password": "faculty123",
        "role": PrincipalRole.FACULTY,
    },
    {
        "faculty_id": "ADMIN-01",
        "name": "Campus Admin",
        "department": "Administration",
        "email": "admin@campus.edu",
        "phone": "9876511000",
        "designation": "Dean of Student Affairs",
        "password": "admin123",
        "role": PrincipalRole.ADMIN,
    },
]


async def seed_students(db: AsyncSession, students: List[Dict]) -> int:
    created = 0
    for data in students:
        result = await db.execute(
            select(Student).where(Student.roll_number == data["roll_number"])
        )
        if result.scalar_one_or_none():
            print(f"  Skipped: student {data['roll_number']} (exists)")
            continue
        db.add(Student(**data))
        created += 1
        print(f"  Created: student {data['roll_number']}")
    return created


async def seed_faculty(db: AsyncSession, faculty: List[Dict]) -> int:
    created = 0
    for data in faculty:
        result = await db.execute(
            select(Faculty).where(Faculty.faculty_id == data["faculty_id"])
        )
        if result.scalar_one_or_none():
            print(f"  Skipped: faculty {data['faculty_id']} (exists)")
            continue

        record = dict(data)
        password = record.pop("password")
        # Plaintext mode compares the stored value as-is
        if settings.uses_hashed_faculty_passwords():
            password = get_password_hash(password)
        db.add(Faculty(password=password, **record))
        created += 1
        print(f"  Created: {record['role'].value} {data['faculty_id']}")
    return created


async def seed_all():
    """Create tables and insert demo principals"""
    print("=" * 50)
    print("Seeding Campus Events principals...")
    print("=" * 50)

    await init_db()

    async with AsyncSessionLocal() as db:
        students = await seed_students(db, DEMO_STUDENTS)
        faculty = await seed_faculty(db, DEMO_FACULTY)
        await db.commit()

    await close_db()

    print("=" * 50)
    print(f"Done! Students created: {students}, faculty created: {faculty}")
    print("=" * 50)


def main():
    asyncio.run(seed_all())


if __name__ == "__main__":
    main()
