"""
Pharmacy inventory.

One row per (pharmacy, medicine). Increments and decrements are single
UPDATE statements; the decrement carries the non-negativity floor in its
WHERE clause so a concurrent removal can never drive a count below zero.
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.core.exceptions import Conflict, Forbidden, InsufficientStock, NotFound, ValidationFailed
from app.models.account import Role
from app.models.medicine import Medicine
from app.models.stock import Stock
from app.schemas.auth import Identity

logger = logging.getLogger(__name__)


class StockRepository:
    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Stock).options(joinedload(Stock.medicine), joinedload(Stock.pharmacy))

    def list_for(self, identity: Identity, pharm_id: Optional[int] = None) -> List[Stock]:
        if identity.role == Role.PHARMACY:
            pharm_id = identity.id
        q = self._query()
        if pharm_id is not None:
            q = q.filter(Stock.pharm_id == pharm_id)
        return q.order_by(Stock.id.asc()).all()

    def list_by_medicine(self, medicine_id: int) -> dict:
        """
        Pharmacies holding a medicine, largest stock first, plus totals.

        Returns:
            dict: {medicine, stocks, total_pharmacies, total_units}
        """
        medicine = self.db.get(Medicine, medicine_id)
        if medicine is None:
            raise NotFound("Medicine not found")
        stocks = (
            self._query()
            .filter(Stock.medical_id == medicine_id, Stock.num_of_units > 0)
            .order_by(Stock.num_of_units.desc(), Stock.id.asc())
            .all()
        )
        return {
            "medicine": medicine,
            "stocks": stocks,
            "total_pharmacies": len(stocks),
            "total_units": sum(s.num_of_units for s in stocks),
        }

    def get(self, stock_id: int) -> Stock:
        stock = self._query().filter(Stock.id == stock_id).first()
        if stock is None:
            raise NotFound("Stock not found")
        return stock

    def get_for(self, stock_id: int, identity: Identity) -> Stock:
        stock = self.get(stock_id)
        if identity.role == Role.PHARMACY and stock.pharm_id != identity.id:
            raise Forbidden(reason=f"pharmacy {identity.id} reading stock {stock_id}")
        return stock

    def get_owned(self, stock_id: int, pharmacy_id: int) -> Stock:
        stock = self.get(stock_id)
        if stock.pharm_id != pharmacy_id:
            raise Forbidden(reason=f"pharmacy {pharmacy_id} does not own stock {stock_id}")
        return stock

    def create(self, pharmacy_id: int, medical_id: int, num_of_units: int) -> Stock:
        if self.db.get(Medicine, medical_id) is None:
            raise NotFound("Medicine not found")
        existing = (
            self.db.query(Stock.id)
            .filter(Stock.pharm_id == pharmacy_id, Stock.medical_id == medical_id)
            .first()
        )
        if existing:
            raise Conflict("Stock already exists for this medicine. Use update endpoint instead.")
        stock = Stock(pharm_id=pharmacy_id, medical_id=medical_id, num_of_units=num_of_units)
        self.db.add(stock)
        try:
            self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent create for the same pair
            self.db.rollback()
            raise Conflict("Stock already exists for this medicine. Use update endpoint instead.")
        return self.get(stock.id)

    def set_units(self, stock_id: int, pharmacy_id: int, num_of_units: int) -> Stock:
        """Overwrite the unit count."""
        if num_of_units < 0:
            raise ValidationFailed("Number of units cannot be negative")
        stock = self.get_owned(stock_id, pharmacy_id)
        stock.num_of_units = num_of_units
        self.db.commit()
        return self.get(stock_id)

    def increment(self, stock_id: int, pharmacy_id: int, units: int) -> Stock:
        if units <= 0:
            raise ValidationFailed("Valid number of units to add is required")
        updated = (
            self.db.query(Stock)
            .filter(Stock.id == stock_id, Stock.pharm_id == pharmacy_id)
            .update({Stock.num_of_units: Stock.num_of_units + units}, synchronize_session=False)
        )
        self.db.commit()
        if not updated:
            self.get_owned(stock_id, pharmacy_id)
        return self.get(stock_id)

    def decrement(self, stock_id: int, pharmacy_id: int, units: int) -> Stock:
        if units <= 0:
            raise ValidationFailed("Valid number of units to remove is required")
        updated = (
            self.db.query(Stock)
            .filter(
                Stock.id == stock_id,
                Stock.pharm_id == pharmacy_id,
                Stock.num_of_units >= units,
            )
            .update({Stock.num_of_units: Stock.num_of_units - units}, synchronize_session=False)
        )
        self.db.commit()
        if not updated:
            self.get_owned(stock_id, pharmacy_id)
            raise InsufficientStock()
        return self.get(stock_id)

    def delete(self, stock_id: int, pharmacy_id: int) -> None:
        stock = self.get_owned(stock_id, pharmacy_id)
        self.db.delete(stock)
        self.db.commit()
        logger.info(f"[Stocks] Pharmacy {pharmacy_id} deleted stock {stock_id}")
