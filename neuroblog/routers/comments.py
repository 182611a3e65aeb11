import uuid

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from neuroblog.database import get_db
from neuroblog.models.comment import Comment
from neuroblog.models.post import Post
from neuroblog.schemas.comment import CommentIn, CommentOut, CommentThreadOut, CommentUpdate
from neuroblog.services.authz import Principal, get_current_principal

router = APIRouter(prefix="/comments", tags=["comments"])


def _uuid(raw: str, what: str) -> uuid.UUID:
    try:
        return uuid.UUID(raw)
    except ValueError:
        raise HTTPException(status_code=404, detail=f"{what} not found")


def _get(db: Session, comment_id: str) -> Comment:
    c = db.get(Comment, _uuid(comment_id, "Comment"))
    if not c:
        raise HTTPException(status_code=404, detail="Comment not found")
    return c


def _require_author(principal: Principal, c: Comment) -> None:
    if not principal.owns(c.author_id):
        raise HTTPException(status_code=403, detail="Not authorized")


@router.get("/post/{post_id}")
def list_comments(post_id: str, db: Session = Depends(get_db)):
    pid = _uuid(post_id, "Post")
    top = (
        db.query(Comment)
        .filter(Comment.post_id == pid, Comment.parent_id.is_(None))
        .order_by(Comment.created_at.desc())
        .all()
    )
    out = []
    for c in top:
        replies = db.query(Comment).filter(Comment.parent_id == c.id).order_by(Comment.created_at.asc()).all()
        thread = CommentThreadOut.model_validate(c)
        thread.replies = [CommentOut.model_validate(r) for r in replies]
        out.append(thread.model_dump(mode="json"))
    return out


@router.post("", status_code=201)
def create_comment(payload: CommentIn, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    if principal.user_id is None:
        raise HTTPException(status_code=403, detail="System sessions cannot comment")
    if not db.get(Post, payload.post_id):
        raise HTTPException(status_code=404, detail="Post not found")
    if payload.parent_id and not db.get(Comment, payload.parent_id):
        raise HTTPException(status_code=404, detail="Parent comment not found")

    c = Comment(
        content=payload.content,
        post_id=payload.post_id,
        author_id=principal.user_id,
        parent_id=payload.parent_id,
        upvotes=0,
    )
    db.add(c)
    db.commit()
    db.refresh(c)
    return CommentOut.model_validate(c).model_dump(mode="json")


@router.put("/{comment_id}")
def update_comment(
    comment_id: str,
    payload: CommentUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    c = _get(db, comment_id)
    _require_author(principal, c)
    c.content = payload.content
    db.commit()
    db.refresh(c)
    return CommentOut.model_validate(c).model_dump(mode="json")


@router.delete("/{comment_id}")
def delete_comment(comment_id: str, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    c = _get(db, comment_id)
    _require_author(principal, c)
    db.query(Comment).filter(Comment.parent_id == c.id).delete(synchronize_session=False)
    db.delete(c)
    db.commit()
    return {"message": "Comment deleted successfully"}


@router.post("/{comment_id}/upvote")
def upvote_comment(comment_id: str, db: Session = Depends(get_db), principal: Principal = Depends(get_current_principal)):
    c = _get(db, comment_id)
    c.upvotes = (c.upvotes or 0) + 1
    db.commit()
    return {"upvotes": c.upvotes}
