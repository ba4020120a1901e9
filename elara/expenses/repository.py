"""Repository for expense persistence."""

import logging
from typing import List

from sqlalchemy import select

from .database import ExpenseDatabase
from .models import Expense

logger = logging.getLogger(__name__)


class ExpenseRepository:
    """Create, list and delete expenses."""

    def __init__(self, db: ExpenseDatabase):
        self.db = db

    async def create(self, title: str, amount: float) -> Expense:
        async with self.db.get_session() as session:
            expense = Expense(title=title, amount=amount)
            session.add(expense)
            await session.commit()
            await session.refresh(expense)

            logger.info(f"Created expense {expense.id}: {title}")
            return expense

    async def list(self) -> List[Expense]:
        """All expenses, newest first."""
        async with self.db.get_session() as session:
            result = await session.execute(
                select(Expense).order_by(Expense.created_at.desc())
            )
            return list(result.scalars().all())

    async def delete(self, expense_id: str) -> bool:
        """Delete an expense. Returns False when no such expense exists."""
        async with self.db.get_session() as session:
            expense = await session.get(Expense, expense_id)
            if expense is None:
                return False

            await session.delete(expense)
            await session.commit()
            logger.info(f"Deleted expense {expense_id}")
            return True
