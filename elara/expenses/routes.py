from typing import List

from fastapi import APIRouter, Depends, Request

from elara.core.errors import ApiError
from elara.models.schemas import ErrorResponse
from .repository import ExpenseRepository
from .schemas import ExpenseCreate, ExpenseDeleted, ExpenseOut

router = APIRouter(tags=["expenses"])


def get_repository(request: Request) -> ExpenseRepository:
    return ExpenseRepository(request.app.state.expense_db)


ExpenseRepositoryDep = Depends(get_repository)


@router.post("/post", response_model=ExpenseOut, status_code=201)
async def create_expense(payload: ExpenseCreate, repository: ExpenseRepository = ExpenseRepositoryDep):
    return await repository.create(payload.title, payload.amount)


@router.get("/get", response_model=List[ExpenseOut])
async def list_expenses(repository: ExpenseRepository = ExpenseRepositoryDep):
    return await repository.list()


@router.delete("/delete/{expense_id}", response_model=ExpenseDeleted, responses={404: {"model": ErrorResponse}})
async def delete_expense(expense_id: str, repository: ExpenseRepository = ExpenseRepositoryDep):
    if not await repository.delete(expense_id):
        raise ApiError(404, "expense_not_found")
    return ExpenseDeleted(deleted=expense_id)
