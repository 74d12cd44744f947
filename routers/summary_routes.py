# routers/summary_routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas.summary import PortfolioSummary
from services.portfolio_service import get_portfolio_summary

router = APIRouter(tags=["summary"])


@router.get("/summary", response_model=PortfolioSummary)
def portfolio_summary(db: Session = Depends(get_db)):
    return get_portfolio_summary(db)
