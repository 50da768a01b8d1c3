"""
Bill statement and daily summary routes.
"""
from fastapi import APIRouter, Depends, Query
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from mandi.db.session import get_db
from mandi.models.user import User
from mandi.models.party import PartyType
from mandi.schemas.statement import BillStatementResponse, DailyMandiSummaryResponse
from mandi.services import statement_service
from mandi.api.dependencies import get_current_user

router = APIRouter(tags=["statements"])


@router.get("/bills/{entity_type}/{entity_id}", response_model=BillStatementResponse)
async def get_bill_statement(
    entity_type: PartyType,
    entity_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Bill statement for a kisan or vyapari.

    Both dates are inclusive. Activity before start_date forms the opening balance.
    """
    return statement_service.get_bill_statement(db, entity_type, entity_id, start_date, end_date)


@router.get("/bills/{entity_type}/{entity_id}/print", response_class=PlainTextResponse)
async def print_bill_statement(
    entity_type: PartyType,
    entity_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Printable bill with the next bill number."""
    return statement_service.print_bill(db, entity_type, entity_id, start_date, end_date)


@router.get("/summary/daily", response_model=DailyMandiSummaryResponse)
async def get_daily_summary(
    summary_date: Optional[date] = Query(None, alias="date"),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Day totals plus outstanding balances. Defaults to today."""
    return statement_service.get_daily_summary(db, summary_date or date.today())
