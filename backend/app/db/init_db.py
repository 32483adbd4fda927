"""Create all tables. Run on app startup.

With SEED_DEMO_DATA enabled, an empty catalogue gets a starter list of
common medicines so a fresh install has something to order.
"""
import logging
from decimal import Decimal

from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.base import Base
from app.db.session import SessionLocal, engine
from app import models  # noqa: F401 - register models
from app.models.medicine import Medicine

logger = logging.getLogger(__name__)

STARTER_MEDICINES = [
    ("Paracetamol 500mg", Decimal("2.50")),
    ("Ibuprofen 400mg", Decimal("3.20")),
    ("Aspirin 100mg", Decimal("1.80")),
    ("Amoxicillin 500mg", Decimal("6.90")),
    ("Omeprazole 20mg", Decimal("4.10")),
    ("Cetirizine 10mg", Decimal("2.00")),
    ("Metformin 500mg", Decimal("3.75")),
    ("Salbutamol Inhaler", Decimal("8.40")),
]


def seed_medicines(db: Session) -> int:
    """Insert the starter catalogue if the medicines table is empty. Returns rows added."""
    if db.query(Medicine).count() > 0:
        return 0
    for name, price in STARTER_MEDICINES:
        db.add(Medicine(name=name, price=price))
    db.commit()
    logger.info(f"[Seed] Added {len(STARTER_MEDICINES)} starter medicines")
    return len(STARTER_MEDICINES)


def init_db():
    Base.metadata.create_all(bind=engine)

    if settings.SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            seed_medicines(db)
        finally:
            db.close()
