# canteen/api/routers/catalog.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from canteen.api.auth import CurrentUser, require_admin
from canteen.data.database import get_db
from canteen.domain.errors import InternalError, InvalidInput, NotFound
from canteen.domain.schemas import (
    CategoryCreated,
    CategoryIn,
    CategoryOut,
    MenuItemOut,
    MessageOut,
    ProductCreated,
    ProductIn,
    ProductOut,
)
from canteen.services.catalog_service import CatalogService

router = APIRouter(tags=["catalog"])


def get_service(db: Session):
    return CatalogService(db)


@router.get("/menu", response_model=List[MenuItemOut])
def get_menu(db: Session = Depends(get_db)):
    return get_service(db).list_menu()


@router.get("/categories", response_model=List[CategoryOut])
def get_categories(db: Session = Depends(get_db)):
    return get_service(db).list_categories()


@router.post("/categories", response_model=CategoryCreated, status_code=201)
def create_category(
    payload: CategoryIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        category = svc.create_category(payload.category_name)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"category_id": category.category_id, "category_name": category.category_name}


@router.delete("/categories/{category_id}", response_model=MessageOut)
def delete_category(
    category_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_category(category_id)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Category deleted successfully"}


@router.get("/admin/products", response_model=List[ProductOut])
def list_products(
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return get_service(db).list_products()


@router.post("/admin/products", response_model=ProductCreated, status_code=201)
def create_product(
    payload: ProductIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        product = svc.create_product(payload)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"item_id": product.item_id}


@router.put("/admin/products/{item_id}", response_model=MessageOut)
def update_product(
    item_id: int,
    payload: ProductIn,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.update_product(item_id, payload)
    except InvalidInput as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Product updated successfully"}


@router.delete("/admin/products/{item_id}", response_model=MessageOut)
def delete_product(
    item_id: int,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = get_service(db)
    try:
        svc.delete_product(item_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InternalError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return {"message": "Product deleted successfully"}
