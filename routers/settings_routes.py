# routers/settings_routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database import get_db
from schemas.settings import SettingsOut, SettingsUpdate
from services.settings_service import get_aum, set_aum

router = APIRouter(tags=["settings"])


@router.get("", response_model=SettingsOut)
def get_settings(db: Session = Depends(get_db)):
    return SettingsOut(aum=get_aum(db))


@router.put("", response_model=SettingsOut)
def update_settings(payload: SettingsUpdate, db: Session = Depends(get_db)):
    return SettingsOut(aum=set_aum(db, payload.aum))
