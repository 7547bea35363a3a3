import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from database import get_db
from helper import load_settings
from models import *

logger = logging.getLogger(__name__)

config_router = APIRouter(
    tags=["Config"]
)

@config_router.get("/config/reservations", tags=["Config"])
def get_reservation_settings(db: Session = Depends(get_db)):
    """Reservation rules in minutes; defaults apply until they are saved once."""
    try:
        return load_settings(db).model_dump(mode="json", exclude={"id"})
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

@config_router.put("/config/reservations", tags=["Config"])
def update_reservation_settings(config: ReservationSettingsUpdate, db: Session = Depends(get_db)):

    try:
        db_config = db.query(ReservationSettingsDB).first()
        if not db_config:
            db_config = ReservationSettingsDB(**ReservationSettings().model_dump(exclude={"id"}))
            db.add(db_config)

        for field, value in config.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(db_config, field, value)

        db.commit()
        db.refresh(db_config)
        logger.info("Reservation settings updated: %s", config.model_dump(exclude_unset=True))
        return {
            "success": True,
            "updated_config": ReservationSettings.model_validate(db_config).model_dump(mode="json", exclude={"id"})
        }
    except Exception as e:
        db.rollback()
        raise HTTPException(status_code=500, detail=str(e))
