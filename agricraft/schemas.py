from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DetectedType = Literal["coconut_shell", "banana_stem", "rice_husk", "unknown"]
Confidence = Literal["high", "medium", "low"]

DETECTED_TYPES = ("coconut_shell", "banana_stem", "rice_husk", "unknown")
CONFIDENCE_LEVELS = ("high", "medium", "low")


class ImageAsset(BaseModel):
    model_config = ConfigDict(frozen=True)

    data: bytes
    content_type: str
    name: str

    @property
    def size(self) -> int:
        return len(self.data)


class CompressionBudget(BaseModel):
    model_config = ConfigDict(frozen=True)

    max_bytes: int = 1024 * 1024
    max_dimension: int = 1080


class ClassificationRecord(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    detected_type: DetectedType = Field("unknown", alias="detectedType")
    confidence: Confidence = "low"
    guidance: str = "No guidance available."
    full_response: str = Field("", alias="fullResponse")


class ClassifyResponse(BaseModel):
    classification: ClassificationRecord
    image_url: str
    compressed: bool
    original_size: int
    final_size: int


class WasteClassificationCreate(BaseModel):
    farmer_id: str
    image_url: str
    detected_type: Optional[str] = None
    confidence: Optional[str] = None
    ai_response: Optional[str] = None


class WasteClassification(WasteClassificationCreate):
    id: str
    created_at: datetime


class ProductCreate(BaseModel):
    farmer_id: str
    title: str
    description: Optional[str] = None
    image_url: str
    price: float
    material_type: str = "other"
    farmer_phone: str


class Product(ProductCreate):
    id: str
    status: str = "active"
    created_at: datetime
    updated_at: datetime


class ProductUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, gt=0)
    material_type: Optional[str] = None
    farmer_phone: Optional[str] = None
    status: Optional[str] = None


class ProductFilters(BaseModel):
    material: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    search: Optional[str] = None


class FeedbackCreate(BaseModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    message: str


class Feedback(FeedbackCreate):
    id: str
    created_at: datetime


UserRole = Literal["farmer", "buyer", "admin"]


class Profile(BaseModel):
    id: str
    username: str
    phone: Optional[str] = None
    email: Optional[str] = None
    role: UserRole
    created_at: datetime


class RoleUpdate(BaseModel):
    role: str
