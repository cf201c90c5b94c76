"""Persistence layer for saved loan templates.

A template is a set of loan parameters stored under a key so the form can be
pre-filled later. The store is a single key/value table behind SQLAlchemy;
it defaults to SQLite for local development but accepts any
SQLAlchemy-compatible URL.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from amort_calc.data_models import LoanParameters

logger = logging.getLogger(__name__)

Base = declarative_base()

DEFAULT_TEMPLATE_KEY = "loanTemplate"


class LoanTemplateModel(Base):
    __tablename__ = "loan_templates"

    key = Column(String(255), primary_key=True)
    value_json = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class TemplateStore:
    """Database-backed key/value store for ``LoanParameters``."""

    def __init__(self, url: str) -> None:
        self._engine = create_engine(url, future=True)
        Base.metadata.create_all(self._engine)
        self._session_factory = sessionmaker(self._engine, expire_on_commit=False, future=True)

    def save(self, key: str, params: LoanParameters) -> None:
        """Store ``params`` under ``key``, replacing any previous value."""
        payload = json.dumps(params.to_dict())
        with self._session_factory() as session:
            row = session.get(LoanTemplateModel, key)
            if row is None:
                session.add(LoanTemplateModel(key=key, value_json=payload))
            else:
                row.value_json = payload
                row.updated_at = datetime.utcnow()
            session.commit()
        logger.info("Saved loan template %r", key)

    def load(self, key: str) -> Optional[LoanParameters]:
        with self._session_factory() as session:
            row = session.get(LoanTemplateModel, key)
            if row is None:
                return None
            return LoanParameters.from_dict(json.loads(row.value_json))

    def delete(self, key: str) -> None:
        with self._session_factory() as session:
            row = session.get(LoanTemplateModel, key)
            if row is not None:
                session.delete(row)
                session.commit()


def create_store_from_env(url: str | None) -> TemplateStore:
    return TemplateStore(url or "sqlite:///loan_templates.sqlite3")
