from __future__ import annotations

import uuid
from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import database, schemas, summaries
from ..deps import get_current_user_id, get_today

router = APIRouter(prefix="/summaries", tags=["summaries"])


@router.get("/monthly", response_model=List[schemas.MonthlySummary])
def get_monthly_summary(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(database.get_db),
    today: date = Depends(get_today),
) -> List[schemas.MonthlySummary]:
    return summaries.monthly_summary(db, user_id, today)


@router.get("/categories", response_model=List[schemas.CategorySummary])
def get_category_summary(
    user_id: uuid.UUID = Depends(get_current_user_id),
    db: Session = Depends(database.get_db),
    today: date = Depends(get_today),
) -> List[schemas.CategorySummary]:
    return summaries.category_summary(db, user_id, today)
