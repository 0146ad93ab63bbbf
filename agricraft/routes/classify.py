# agricraft/routes/classify.py
import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile

from .. import blob_service, repository
from ..db import get_db
from ..errors import NetworkError, StorageError, StreamReadError
from ..schemas import ClassifyResponse, WasteClassification, WasteClassificationCreate
from ..services import classifier
from ..services.validators import validate_user_id
from ..utils.logger import log_error
from .common import read_image_upload, shrink_to_budget

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/classifications", tags=["classifications"])


@router.post("", response_model=ClassifyResponse)
async def classify_upload(
    image: UploadFile = File(...),
    farmer_id: str = Form(...),
    db=Depends(get_db),
):
    """
    Upload pipeline for a waste photo:
      validate -> compress if over budget -> store -> classify -> persist row
    Nothing is persisted if classification fails; the stored image is removed again.
    """
    farmer_id = validate_user_id(farmer_id)
    original = await read_image_upload(image)
    asset, compressed = await shrink_to_budget(original)
    if compressed:
        logger.info("compressed %s from %.2fMB to %.2fMB", original.name,
                    original.size / 1024 / 1024, asset.size / 1024 / 1024)

    object_name = blob_service.build_object_name("waste", farmer_id, asset.name, asset.content_type)
    try:
        image_url = await blob_service.upload_image(asset.data, object_name, asset.content_type)
    except StorageError as e:
        await log_error("blob_upload", str(e), {"farmer_id": farmer_id}, db=db)
        raise

    try:
        record = await classifier.classify_waste(asset)
    except (StreamReadError, NetworkError) as e:
        await log_error("classify", str(e), {"farmer_id": farmer_id, "image_url": image_url}, db=db)
        try:
            await blob_service.delete_image(object_name)
        except StorageError as cleanup_error:
            logger.warning("could not remove %s after failed classification: %s", object_name, cleanup_error)
        raise

    await repository.create_classification(db, WasteClassificationCreate(
        farmer_id=farmer_id,
        image_url=image_url,
        detected_type=record.detected_type,
        confidence=record.confidence,
        ai_response=record.full_response,
    ))

    return ClassifyResponse(
        classification=record,
        image_url=image_url,
        compressed=compressed,
        original_size=original.size,
        final_size=asset.size,
    )


@router.get("", response_model=List[WasteClassification])
async def farmer_classifications(farmer_id: str = Query(...), db=Depends(get_db)):
    return await repository.list_farmer_classifications(db, farmer_id)
