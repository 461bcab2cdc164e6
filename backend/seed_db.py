"""
JobBoard Database Seeder

Creates demo users covering every login-role case:
- Sarah Chen: company profile only
- John Doe: candidate profile only
- Alex Rivera: both profiles, asked to pick a role at login
"""

import asyncio
import sys
sys.path.insert(0, ".")

from app.db.session import SessionLocal, engine
from app.db.base import Base
from app.db.document_store import DocumentStore
from app.models.user import User
from app.core.clock import Clock
from app.core.security import get_password_hash
from app.schemas.profile import (
    CandidateProfileCreate,
    CompanyProfileCreate,
)
from app.services import AccountService, ProfileExistenceChecker, ProfileService

SEED_PASSWORD = "Seed-Pass-2026!"

JOHN_CANDIDATE = {
    "personal_info": {"first_name": "John", "last_name": "Doe", "location": "Austin, TX"},
    "professional_info": {
        "title": "Senior Software Engineer",
        "experience": "4 years",
        "skills": ["Python", "React", "FastAPI", "Docker"],
    },
    "preferences": {
        "job_types": ["full-time"],
        "locations": ["Remote", "Austin, TX"],
        "salary_range": {"min": 120000, "max": 160000},
    },
}

SARAH_COMPANY = {
    "company_info": {
        "name": "Northwind Labs",
        "industry": "Software",
        "size": "50-200",
        "website": "https://northwind.example.com",
    },
    "contact_info": {"contact_person": "Sarah Chen", "phone": "+1 512 555 0100"},
}

ALEX_CANDIDATE = {
    "personal_info": {"first_name": "Alex", "last_name": "Rivera"},
    "professional_info": {"title": "Product Designer", "skills": ["Figma", "UX Research"]},
}

ALEX_COMPANY = {
    "company_info": {"name": "Rivera Studio", "industry": "Design"},
    "contact_info": {"contact_person": "Alex Rivera"},
}


async def seed_database():
    """Seed the database with demo users and profiles."""

    # Create all tables
    Base.metadata.create_all(bind=engine)

    db = SessionLocal()

    try:
        # Check if already seeded
        existing = db.query(User).filter(User.email == "sarah.chen@northwind.example.com").first()
        if existing:
            print("Database already seeded. Skipping...")
            return

        print("Seeding database...")

        clock = Clock()
        store = DocumentStore(db)
        checker = ProfileExistenceChecker(store)
        accounts = AccountService(store, clock)
        profiles = ProfileService(store, checker, accounts, clock)

        users = {}
        for email, full_name in [
            ("sarah.chen@northwind.example.com", "Sarah Chen"),
            ("john.doe@example.com", "John Doe"),
            ("alex.rivera@example.com", "Alex Rivera"),
        ]:
            user = User(
                email=email,
                hashed_password=get_password_hash(SEED_PASSWORD),
                full_name=full_name,
            )
            db.add(user)
            db.commit()
            db.refresh(user)
            await accounts.create_or_update_unified_account(user.uid, user.email)
            users[full_name] = user

        await profiles.create_company_profile(
            users["Sarah Chen"].uid, CompanyProfileCreate.model_validate(SARAH_COMPANY)
        )
        await profiles.create_candidate_profile(
            users["John Doe"].uid, CandidateProfileCreate.model_validate(JOHN_CANDIDATE)
        )
        await profiles.create_candidate_profile(
            users["Alex Rivera"].uid, CandidateProfileCreate.model_validate(ALEX_CANDIDATE)
        )
        await profiles.create_company_profile(
            users["Alex Rivera"].uid, CompanyProfileCreate.model_validate(ALEX_COMPANY)
        )

        print("✅ Database seeded successfully!")
        print(f"\n📋 Created Users (password: {SEED_PASSWORD}):")
        print("   - sarah.chen@northwind.example.com [COMPANY]")
        print("   - john.doe@example.com [CANDIDATE]")
        print("   - alex.rivera@example.com [CANDIDATE + COMPANY, asked at login]")

    except Exception as e:
        db.rollback()
        print(f"❌ Error seeding database: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    asyncio.run(seed_database())
