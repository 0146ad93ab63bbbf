# agricraft/routes/products.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, Response, UploadFile

from .. import blob_service, repository
from ..db import get_db
from ..schemas import Product, ProductCreate, ProductFilters, ProductUpdate
from ..services.validators import validate_phone, validate_price, validate_title, validate_user_id
from .common import read_image_upload, shrink_to_budget

router = APIRouter(tags=["products"])


@router.post("/products", response_model=Product, status_code=201)
async def create_listing(
    image: UploadFile = File(...),
    title: str = Form(...),
    price: str = Form(...),
    phone: str = Form(...),
    farmer_id: str = Form(...),
    description: Optional[str] = Form(None),
    material_type: Optional[str] = Form(None),
    db=Depends(get_db),
):
    # all field checks run before the image is read or stored
    farmer_id = validate_user_id(farmer_id)
    title = validate_title(title)
    amount = validate_price(price)
    phone = validate_phone(phone)
    original = await read_image_upload(image)

    asset, _ = await shrink_to_budget(original)
    object_name = blob_service.build_object_name("product", farmer_id, asset.name, asset.content_type)
    image_url = await blob_service.upload_image(asset.data, object_name, asset.content_type)

    return await repository.create_product(db, ProductCreate(
        farmer_id=farmer_id,
        title=title,
        description=description or None,
        image_url=image_url,
        price=amount,
        material_type=material_type or "other",
        farmer_phone=phone,
    ))


@router.get("/products", response_model=List[Product])
async def marketplace(
    material: Optional[str] = Query(None),
    min_price: Optional[float] = Query(None),
    max_price: Optional[float] = Query(None),
    search: Optional[str] = Query(None),
    db=Depends(get_db),
):
    filters = ProductFilters(material=material, min_price=min_price, max_price=max_price, search=search)
    return await repository.list_products(db, filters)


@router.get("/products/{product_id}", response_model=Product)
async def product_details(product_id: str, db=Depends(get_db)):
    product = await repository.get_product(db, product_id)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.patch("/products/{product_id}", response_model=Product)
async def edit_listing(product_id: str, updates: ProductUpdate, db=Depends(get_db)):
    if updates.title is not None:
        updates.title = validate_title(updates.title)
    if updates.farmer_phone is not None:
        validate_phone(updates.farmer_phone)
    product = await repository.update_product(db, product_id, updates)
    if product is None:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.delete("/products/{product_id}", status_code=204)
async def remove_listing(product_id: str, db=Depends(get_db)):
    if not await repository.delete_product(db, product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return Response(status_code=204)


@router.get("/farmers/{farmer_id}/products", response_model=List[Product])
async def farmer_listings(farmer_id: str, db=Depends(get_db)):
    return await repository.list_farmer_products(db, farmer_id)
