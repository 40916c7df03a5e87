"""
Postboard - Post Routes

- GET    /posts        - List posts
- GET    /posts/{id}   - Get a post (null if absent)
- POST   /posts        - Create a post (login required)
- PATCH  /posts/{id}   - Update title (null if absent)
- DELETE /posts/{id}   - Delete a post
"""

import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session as DBSession, select

from postboard.auth.dependencies import get_db, require_user
from postboard.auth.sessions import SessionContext
from postboard.database import storage_errors
from postboard.posts.models import Post

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])


class PostCreate(BaseModel):
    title: str


class PostUpdate(BaseModel):
    title: Optional[str] = None


class PostResponse(BaseModel):
    id: int
    title: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


@router.get("", response_model=List[PostResponse])
async def list_posts(db: DBSession = Depends(get_db)):
    with storage_errors():
        return db.exec(select(Post).order_by(Post.id)).all()


@router.get("/{post_id}", response_model=Optional[PostResponse])
async def get_post(post_id: int, db: DBSession = Depends(get_db)):
    with storage_errors():
        return db.get(Post, post_id)


@router.post("", response_model=PostResponse)
async def create_post(
    body: PostCreate,
    db: DBSession = Depends(get_db),
    session: SessionContext = Depends(require_user),
):
    now = datetime.utcnow()
    post = Post(title=body.title, created_at=now, updated_at=now)

    with storage_errors():
        db.add(post)
        db.commit()
        db.refresh(post)

    logger.info("Post %s created by user id=%s", post.id, session.user_id)
    return post


@router.patch("/{post_id}", response_model=Optional[PostResponse])
async def update_post(post_id: int, body: PostUpdate, db: DBSession = Depends(get_db)):
    with storage_errors():
        post = db.get(Post, post_id)
        if post is None:
            return None

        if body.title is not None:
            post.title = body.title
            post.updated_at = datetime.utcnow()
            db.add(post)
            db.commit()
            db.refresh(post)

    return post


@router.delete("/{post_id}", response_model=bool)
async def delete_post(post_id: int, db: DBSession = Depends(get_db)):
    with storage_errors():
        post = db.get(Post, post_id)
        if post is not None:
            db.delete(post)
            db.commit()

    logger.info("Post %s deleted", post_id)
    return True
