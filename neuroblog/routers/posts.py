from __future__ import annotations

import math
import uuid
from collections import Counter
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import String, asc, cast, desc, or_
from sqlalchemy.orm import Session

from neuroblog.database import get_db
from neuroblog.models.category import Category
from neuroblog.models.post import Post
from neuroblog.schemas.post import PostIn, PostOut, PostUpdate, ReactIn
from neuroblog.services.authz import Principal, get_current_principal, get_optional_principal
from neuroblog.utils.dates import format_publish_date
from neuroblog.utils.tags import normalize_tags

router = APIRouter(prefix="/posts", tags=["posts"])


def _parse_id(post_id: str) -> uuid.UUID:
    try:
        return uuid.UUID(post_id)
    except ValueError:
        raise HTTPException(status_code=404, detail="Post not found")


def _get_post(db: Session, post_id: str) -> Post:
    post = db.get(Post, _parse_id(post_id))
    if not post:
        raise HTTPException(status_code=404, detail="Post not found")
    return post


def _can_edit(principal: Principal, post: Post) -> bool:
    return principal.is_admin or principal.owns(post.author_id)


def _check_category(db: Session, category_id: Optional[uuid.UUID]) -> None:
    if category_id and not db.get(Category, category_id):
        raise HTTPException(status_code=400, detail="Category not found")


def _dump(post: Post) -> dict:
    return PostOut.model_validate(post).model_dump(mode="json")


@router.get("")
def list_posts(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: str = Query("published"),
    category: Optional[uuid.UUID] = None,
    author: Optional[uuid.UUID] = None,
    tags: Optional[str] = None,
    sort_by: str = Query("newest", alias="sortBy"),
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_optional_principal),
):
    q = db.query(Post)

    is_admin = bool(principal and principal.is_admin)
    own_posts = bool(principal and author and principal.owns(author))
    if is_admin or own_posts:
        if status != "all":
            q = q.filter(Post.status == status)
    else:
        # everyone else only sees published posts
        q = q.filter(Post.status == "published")

    if category:
        q = q.filter(Post.category_id == category)
    if author:
        q = q.filter(Post.author_id == author)
    if tags:
        wanted = normalize_tags(tags.split(","))
        if wanted:
            q = q.filter(or_(*[cast(Post.tags, String).ilike(f'%"{t}"%') for t in wanted]))

    total = q.count()
    order = asc(Post.created_at) if sort_by == "oldest" else desc(Post.created_at)
    rows = q.order_by(order).offset((page - 1) * limit).limit(limit).all()

    return {
        "posts": [_dump(p) for p in rows],
        "total": total,
        "page": page,
        "pages": math.ceil(total / limit) if total else 0,
    }


@router.get("/search/{query}")
def search_posts(query: str, db: Session = Depends(get_db)):
    term = f"%{query.strip()}%"
    rows = (
        db.query(Post)
        .filter(Post.status == "published")
        .filter(or_(Post.title.ilike(term), Post.summary.ilike(term), Post.body.ilike(term)))
        .order_by(desc(Post.created_at))
        .limit(50)
        .all()
    )
    return [_dump(p) for p in rows]


@router.get("/popular-tags")
def popular_tags(db: Session = Depends(get_db)):
    counts: Counter = Counter()
    for (tags,) in db.query(Post.tags).filter(Post.status == "published").all():
        counts.update(tags or [])
    return [tag for tag, _ in counts.most_common(10)]


@router.get("/{post_id}")
def get_post(
    post_id: str,
    db: Session = Depends(get_db),
    principal: Optional[Principal] = Depends(get_optional_principal),
):
    post = _get_post(db, post_id)
    # drafts look missing to anyone but the author/admin
    if post.status == "draft" and not (principal and _can_edit(principal, post)):
        raise HTTPException(status_code=404, detail="Post not found")
    return _dump(post)


@router.post("", status_code=201)
def create_post(
    payload: PostIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    if principal.user_id is None:
        raise HTTPException(status_code=403, detail="System sessions cannot author posts")
    _check_category(db, payload.category_id)

    post = Post(
        title=payload.title.strip(),
        body=payload.body,
        summary=payload.summary,
        author_id=principal.user_id,
        category_id=payload.category_id,
        tags=normalize_tags(payload.tags),
        status=payload.status,
        schedule_date=payload.schedule_date,
        featured=payload.featured,
        read_time=payload.read_time,
        publish_date=format_publish_date(),
        reactions=[],
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return _dump(post)


@router.put("/{post_id}")
def update_post(
    post_id: str,
    payload: PostUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    post = _get_post(db, post_id)
    if not _can_edit(principal, post):
        raise HTTPException(status_code=403, detail="Not authorized")

    data = payload.model_dump(exclude_unset=True)
    if "category_id" in data:
        _check_category(db, data["category_id"])
    if "tags" in data:
        data["tags"] = normalize_tags(data["tags"] or [])
    for k, v in data.items():
        if v is not None or k in ("category_id", "schedule_date", "summary"):
            setattr(post, k, v)

    db.commit()
    db.refresh(post)
    return _dump(post)


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    post = _get_post(db, post_id)
    if not _can_edit(principal, post):
        raise HTTPException(status_code=403, detail="Not authorized")
    db.delete(post)
    db.commit()
    return {"message": "Post deleted successfully"}


@router.post("/{post_id}/react")
def react(
    post_id: str,
    payload: ReactIn,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    post = _get_post(db, post_id)
    who = str(principal.user_id) if principal.user_id else f"system:{principal.username}"

    reactions = [dict(r) for r in (post.reactions or [])]
    mine = next((r for r in reactions if r.get("user") == who), None)
    if mine is None:
        reactions.append({"emoji": payload.emoji, "user": who})
    elif mine.get("emoji") == payload.emoji:
        # same emoji again toggles it off
        reactions.remove(mine)
    else:
        mine["emoji"] = payload.emoji

    # reassign so the JSON column is marked dirty
    post.reactions = reactions
    db.commit()
    return reactions
