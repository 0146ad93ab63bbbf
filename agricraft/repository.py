# agricraft/repository.py
import re
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pymongo import DESCENDING, ReturnDocument

from .schemas import (
    Feedback,
    FeedbackCreate,
    Product,
    ProductCreate,
    ProductFilters,
    ProductUpdate,
    Profile,
    WasteClassification,
    WasteClassificationCreate,
)
from .services.validators import validate_role

PRODUCTS = "products"
CLASSIFICATIONS = "waste_classifications"
FEEDBACK = "feedback"
PROFILES = "profiles"

_NO_ID = {"_id": 0}

CLEARABLE_PRODUCT_FIELDS = {"description"}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _new_doc(fields: Dict[str, Any]) -> Dict[str, Any]:
    return {"id": uuid.uuid4().hex, "created_at": _now(), **fields}


async def _insert(db, collection: str, doc: Dict[str, Any]) -> Dict[str, Any]:
    await db[collection].insert_one(doc)
    doc.pop("_id", None)  # driver adds it in place
    return doc


async def _list(db, collection: str, query: Dict[str, Any]) -> List[Dict[str, Any]]:
    cursor = db[collection].find(query, _NO_ID).sort("created_at", DESCENDING)
    return await cursor.to_list(length=None)


# ---------- products ----------

def build_product_query(filters: Optional[ProductFilters] = None) -> Dict[str, Any]:
    query: Dict[str, Any] = {"status": "active"}
    if filters is None:
        return query
    if filters.material and filters.material != "all":
        query["material_type"] = filters.material
    price: Dict[str, float] = {}
    if filters.min_price is not None:
        price["$gte"] = filters.min_price
    if filters.max_price is not None:
        price["$lte"] = filters.max_price
    if price:
        query["price"] = price
    if filters.search:
        pattern = {"$regex": re.escape(filters.search), "$options": "i"}
        query["$or"] = [{"title": pattern}, {"description": pattern}]
    return query


async def list_products(db, filters: Optional[ProductFilters] = None) -> List[Product]:
    docs = await _list(db, PRODUCTS, build_product_query(filters))
    return [Product(**d) for d in docs]


async def get_product(db, product_id: str) -> Optional[Product]:
    doc = await db[PRODUCTS].find_one({"id": product_id}, _NO_ID)
    return Product(**doc) if doc else None


async def list_farmer_products(db, farmer_id: str) -> List[Product]:
    docs = await _list(db, PRODUCTS, {"farmer_id": farmer_id})
    return [Product(**d) for d in docs]


async def create_product(db, product: ProductCreate) -> Product:
    doc = _new_doc(product.model_dump())
    doc["status"] = "active"
    doc["updated_at"] = doc["created_at"]
    return Product(**await _insert(db, PRODUCTS, doc))


async def update_product(db, product_id: str, updates: ProductUpdate) -> Optional[Product]:
    # null clears the description; on any other field it means "unchanged"
    fields = {
        k: v for k, v in updates.model_dump(exclude_unset=True).items()
        if v is not None or k in CLEARABLE_PRODUCT_FIELDS
    }
    fields["updated_at"] = _now()
    doc = await db[PRODUCTS].find_one_and_update(
        {"id": product_id},
        {"$set": fields},
        projection=_NO_ID,
        return_document=ReturnDocument.AFTER,
    )
    return Product(**doc) if doc else None


async def delete_product(db, product_id: str) -> bool:
    result = await db[PRODUCTS].delete_one({"id": product_id})
    return result.deleted_count > 0


# ---------- waste classifications ----------

async def create_classification(db, row: WasteClassificationCreate) -> WasteClassification:
    doc = _new_doc(row.model_dump())
    return WasteClassification(**await _insert(db, CLASSIFICATIONS, doc))


async def list_farmer_classifications(db, farmer_id: str) -> List[WasteClassification]:
    docs = await _list(db, CLASSIFICATIONS, {"farmer_id": farmer_id})
    return [WasteClassification(**d) for d in docs]


# ---------- feedback ----------

async def create_feedback(db, feedback: FeedbackCreate) -> Feedback:
    doc = _new_doc(feedback.model_dump())
    return Feedback(**await _insert(db, FEEDBACK, doc))


async def list_feedback(db) -> List[Feedback]:
    docs = await _list(db, FEEDBACK, {})
    return [Feedback(**d) for d in docs]


# ---------- profiles ----------
# rows are created by the auth service on sign-up; only reads and role changes happen here

async def get_profile(db, user_id: str) -> Optional[Profile]:
    doc = await db[PROFILES].find_one({"id": user_id}, _NO_ID)
    return Profile(**doc) if doc else None


async def list_profiles(db) -> List[Profile]:
    docs = await _list(db, PROFILES, {})
    return [Profile(**d) for d in docs]


async def update_profile_role(db, user_id: str, role: str) -> Optional[Profile]:
    role = validate_role(role)
    doc = await db[PROFILES].find_one_and_update(
        {"id": user_id},
        {"$set": {"role": role}},
        projection=_NO_ID,
        return_document=ReturnDocument.AFTER,
    )
    return Profile(**doc) if doc else None
