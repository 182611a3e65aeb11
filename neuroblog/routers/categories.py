import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from neuroblog.database import get_db
from neuroblog.models.category import Category
from neuroblog.schemas.category import CategoryIn, CategoryOut, CategoryUpdate
from neuroblog.services.authz import Principal, require_admin

router = APIRouter(prefix="/categories", tags=["categories"])


def _get(db: Session, category_id: str) -> Category:
    try:
        cid = uuid.UUID(category_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Category not found")
    c = db.get(Category, cid)
    if not c:
        raise HTTPException(status_code=404, detail="Category not found")
    return c


def _dump(c: Category) -> dict:
    return CategoryOut.model_validate(c).model_dump(mode="json")


@router.get("")
def list_categories(db: Session = Depends(get_db)):
    return [_dump(c) for c in db.query(Category).order_by(Category.name).all()]


@router.get("/{category_id}")
def get_category(category_id: str, db: Session = Depends(get_db)):
    return _dump(_get(db, category_id))


@router.post("", status_code=201)
def create_category(payload: CategoryIn, db: Session = Depends(get_db), principal: Principal = Depends(require_admin)):
    name = payload.name.strip()
    if db.query(Category).filter(Category.name == name).first():
        raise HTTPException(status_code=400, detail="Category already exists")
    if payload.parent_id and not db.get(Category, payload.parent_id):
        raise HTTPException(status_code=404, detail="Parent category not found")

    c = Category(name=name, description=payload.description, parent_id=payload.parent_id)
    db.add(c)
    db.commit()
    db.refresh(c)
    return _dump(c)


@router.put("/{category_id}")
def update_category(
    category_id: str,
    payload: CategoryUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_admin),
):
    c = _get(db, category_id)

    if payload.name and payload.name.strip() != c.name:
        if db.query(Category).filter(Category.name == payload.name.strip()).first():
            raise HTTPException(status_code=400, detail="Category name already exists")
        c.name = payload.name.strip()

    if payload.parent_id:
        if payload.parent_id == c.id:
            raise HTTPException(status_code=400, detail="Category cannot be its own parent")
        if not db.get(Category, payload.parent_id):
            raise HTTPException(status_code=404, detail="Parent category not found")
        c.parent_id = payload.parent_id

    if payload.description is not None:
        c.description = payload.description

    db.commit()
    db.refresh(c)
    return _dump(c)


@router.delete("/{category_id}")
def delete_category(category_id: str, db: Session = Depends(get_db), principal: Principal = Depends(require_admin)):
    c = _get(db, category_id)
    if db.query(Category).filter(Category.parent_id == c.id).first():
        raise HTTPException(status_code=400, detail="Cannot delete category with subcategories")
    db.delete(c)
    db.commit()
    return {"message": "Category deleted successfully"}
