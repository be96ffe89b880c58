"""Initialize the marketplace database.

Creates every table, optionally seeds a few demo advisors and companies and
optionally rebuilds the search index from what ended up in the database.
Production deployments should run ``alembic upgrade head`` instead.
"""

import argparse
import sys
import traceback
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from sqlalchemy.orm import Session

from marketplace.core.config import get_settings
from marketplace.core.db import Base, SessionLocal, engine
from marketplace.models import Advisor, Company, CompanyStatus
from marketplace.services.indexing import reindex_all
from marketplace.services.search_index import get_search_index
from marketplace.services.slugs import unique_slug

DEMO_ADVISORS = [
    {
        "firm_name": "Harbour Street Advisory",
        "team_lead": "Sarah Chen",
        "email": "sarah.chen@harbourstreet.example",
        "phone": "+61 2 9000 1000",
        "street": "Level 1, 225 George Street",
        "suburb": "Sydney",
        "state": "NSW",
        "postcode": "2000",
        "website_url": "https://harbourstreet.example",
        "description": "M&A and equity raising for growth companies.",
        "specialties": ["Technology", "Healthcare", "Finance"],
    },
    {
        "firm_name": "Collins Lane Partners",
        "team_lead": "Michael Rodriguez",
        "email": "michael@collinslane.example",
        "phone": "+61 3 9000 2000",
        "street": "Level 15, 123 Collins Street",
        "suburb": "Melbourne",
        "state": "VIC",
        "postcode": "3000",
        "website_url": "https://collinslane.example",
        "description": "Boutique investment firm focused on growth-stage companies.",
        "specialties": ["Technology", "Manufacturing", "Retail"],
    },
]

DEMO_COMPANIES = [
    {
        "name": "MediTech Innovations",
        "sector": "Healthcare",
        "industry": "Medical Devices",
        "sub_industry": "Diagnostics",
        "description": "AI-assisted diagnostic tools for early disease detection.",
        "suburb": "Pyrmont",
        "state": "NSW",
        "postcode": "2009",
        "latitude": -33.8697,
        "longitude": 151.1947,
        "tags": ["AI", "Diagnostics", "Series A"],
        "amount_seeking": "$2M - $5M",
        "raising_reason": "Clinical trials and regulatory approval.",
        "advisor": 0,
    },
    {
        "name": "GreenGrid Energy",
        "sector": "Energy",
        "industry": "Renewables",
        "description": "Community battery storage for suburban solar networks.",
        "suburb": "Richmond",
        "state": "VIC",
        "postcode": "3121",
        "latitude": -37.8183,
        "longitude": 144.9987,
        "tags": ["Solar", "Storage"],
        "amount_seeking": "$5M - $10M",
        "raising_reason": "Expansion into regional Victoria.",
        "advisor": 1,
    },
    {
        "name": "Harvest Table Foods",
        "sector": "Consumer",
        "industry": "Food & Beverage",
        "description": "Ready-to-cook meal kits sourced from local farms.",
        "suburb": "Fortitude Valley",
        "state": "QLD",
        "postcode": "4006",
        "latitude": -27.4573,
        "longitude": 153.0346,
        "tags": ["D2C", "Food"],
        "amount_seeking": "$500K - $1M",
        "advisor": None,
    },
]


def seed_demo_data(db: Session) -> int:
    """Insert demo advisors and published companies; returns companies added."""
    advisors = [Advisor(**data, status="active") for data in DEMO_ADVISORS]
    db.add_all(advisors)
    db.flush()

    added = 0
    for data in DEMO_COMPANIES:
        data = dict(data)
        advisor_pos = data.pop("advisor")
        company = Company(
            **data,
            slug=unique_slug(db, Company, data["name"], fallback_prefix="company"),
            status=CompanyStatus.PUBLISHED,
            advisor_id=advisors[advisor_pos].id if advisor_pos is not None else None,
        )
        db.add(company)
        db.flush()
        added += 1

    db.commit()
    return added


def init_database(drop: bool = False, seed: bool = False, reindex: bool = False) -> None:
    settings = get_settings()
    print(f"Initializing database: {settings.DATABASE_URL}")

    if drop:
        Base.metadata.drop_all(bind=engine)
        print("✓ Dropped existing tables")

    Base.metadata.create_all(bind=engine)
    print("✓ Created all tables")
    print(f"Tables: {', '.join(Base.metadata.tables.keys())}")

    db = SessionLocal()
    try:
        if seed:
            count = seed_demo_data(db)
            print(f"✓ Seeded {count} demo companies")
        if reindex:
            count = reindex_all(db, get_search_index())
            print(f"✓ Indexed {count} companies into '{settings.MEILISEARCH_INDEX}'")
    finally:
        db.close()

    print("\n✅ Database initialization complete!")


def main() -> None:
    parser = argparse.ArgumentParser(description="Create marketplace tables.")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--seed", action="store_true", help="insert demo advisors and companies")
    parser.add_argument("--reindex", action="store_true", help="rebuild the search index afterwards")
    args = parser.parse_args()

    try:
        init_database(drop=args.drop, seed=args.seed, reindex=args.reindex)
    except Exception as e:
        print(f"\n❌ Error initializing database: {e}")
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
