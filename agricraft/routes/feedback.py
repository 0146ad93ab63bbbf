from typing import List

from fastapi import APIRouter, Depends

from .. import repository
from ..db import get_db
from ..schemas import Feedback, FeedbackCreate
from ..services.validators import validate_feedback_message

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.post("", response_model=Feedback, status_code=201)
async def submit_feedback(req: FeedbackCreate, db=Depends(get_db)):
    message = validate_feedback_message(req.message)
    payload = req.model_copy(update={
        "message": message,
        "name": req.name or None,
        "email": req.email or None,
    })
    return await repository.create_feedback(db, payload)


@router.get("", response_model=List[Feedback])
async def all_feedback(db=Depends(get_db)):
    return await repository.list_feedback(db)
