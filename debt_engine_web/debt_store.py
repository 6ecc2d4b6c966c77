"""Persistence layer for debts.

This module stores debt records in an external database so the web app can
list and reload them. Every operation is scoped to the token of the owning
user: a debt that belongs to someone else behaves exactly like a missing one.
It defaults to SQLite for local development, but accepts any
SQLAlchemy-compatible URL (e.g. PostgreSQL/MySQL).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, List, Optional
from uuid import uuid4

from sqlalchemy import Column, Date, DateTime, Integer, String, Text, create_engine, select
from sqlalchemy.orm import declarative_base, sessionmaker

from debt_engine.config import database_url
from debt_engine.data_models import Debt
from debt_engine.exceptions import DebtNotFoundError
from debt_engine.serialization import extra_payment_from_dict, extra_payment_to_dict
from debt_engine.validation import validate_debt

logger = logging.getLogger(__name__)

Base = declarative_base()


class DebtModel(Base):
    __tablename__ = "debts"

    id = Column(String(64), primary_key=True)
    owner_token = Column(String(64), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    creditor = Column(String(255), nullable=True)
    # Decimal text keeps every digit the debt was validated with
    original_amount = Column(String(64), nullable=False)
    annual_rate = Column(String(64), nullable=False)
    total_installments = Column(Integer, nullable=False)
    installment_period = Column(String(16), nullable=False)
    start_date = Column(Date, nullable=False)
    current_installment = Column(Integer, nullable=False, default=0)
    extra_payments_json = Column(Text, nullable=False, default="[]")
    notes = Column(Text, nullable=True)
    cash_flow_id = Column(String(64), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class DebtStore:
    """Database-backed debt store."""

    def __init__(self, url: str) -> None:
        self._engine = create_engine(url, future=True)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)

    def create(self, owner_token: str, debt: Debt) -> Debt:
        validate_debt(debt)
        row = DebtModel(id=uuid4().hex, owner_token=owner_token, created_at=datetime.utcnow())
        self._apply(row, debt)
        with self._session_factory() as session:
            session.add(row)
            session.commit()
        logger.info("Debt %s created", row.id)
        return self._to_debt(row)

    def list(self, owner_token: str) -> List[Debt]:
        if not owner_token:
            return []
        with self._session_factory() as session:
            rows: Iterable[DebtModel] = session.execute(
                select(DebtModel)
                .where(DebtModel.owner_token == owner_token)
                .order_by(DebtModel.created_at.desc())
            ).scalars()
            return [self._to_debt(row) for row in rows]

    def get(self, owner_token: str, debt_id: str) -> Debt:
        with self._session_factory() as session:
            return self._to_debt(self._owned_row(session, owner_token, debt_id))

    def update(self, owner_token: str, debt_id: str, debt: Debt) -> Debt:
        validate_debt(debt)
        with self._session_factory() as session:
            row = self._owned_row(session, owner_token, debt_id)
            self._apply(row, debt)
            session.commit()
            logger.info("Debt %s updated", debt_id)
            return self._to_debt(row)

    def delete(self, owner_token: str, debt_id: str) -> None:
        with self._session_factory() as session:
            row = self._owned_row(session, owner_token, debt_id)
            session.delete(row)
            session.commit()
        logger.info("Debt %s deleted", debt_id)

    @staticmethod
    def _owned_row(session, owner_token: Optional[str], debt_id: str) -> DebtModel:
        row = session.get(DebtModel, debt_id) if owner_token else None
        if row is None or row.owner_token != owner_token:
            logger.warning("Debt %s not found for requesting owner", debt_id)
            raise DebtNotFoundError(debt_id)
        return row

    @staticmethod
    def _apply(row: DebtModel, debt: Debt) -> None:
        row.name = debt.name
        row.creditor = debt.creditor
        row.original_amount = str(Decimal(debt.original_amount))
        row.annual_rate = str(Decimal(debt.annual_rate))
        row.total_installments = debt.total_installments
        row.installment_period = debt.installment_period
        row.start_date = debt.start_date
        row.current_installment = debt.current_installment
        row.extra_payments_json = json.dumps(
            [dict(extra_payment_to_dict(ep), amount=str(ep.amount)) for ep in debt.extra_payments]
        )
        row.notes = debt.notes
        row.cash_flow_id = debt.cash_flow_id
        row.updated_at = datetime.utcnow()

    @staticmethod
    def _to_debt(row: DebtModel) -> Debt:
        return Debt(
            id=row.id,
            name=row.name,
            creditor=row.creditor,
            original_amount=Decimal(row.original_amount),
            annual_rate=Decimal(row.annual_rate),
            total_installments=row.total_installments,
            installment_period=row.installment_period,
            start_date=row.start_date,
            current_installment=row.current_installment,
            extra_payments=tuple(extra_payment_from_dict(ep) for ep in json.loads(row.extra_payments_json)),
            notes=row.notes,
            cash_flow_id=row.cash_flow_id,
        )


def create_store_from_env(url: str | None = None) -> DebtStore:
    return DebtStore(url or database_url())
