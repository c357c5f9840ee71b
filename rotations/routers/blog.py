from fastapi import APIRouter, Depends, status, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from rotations.core.security import get_current_admin
from rotations.database import get_db
from rotations.models.blog import BlogPostStatus
from rotations.routers.params import RowId
from rotations.schemas.auth import Actor
from rotations.schemas.blog import (
    BlogCategory,
    BlogCategoryCreate,
    BlogPost,
    BlogPostCreate,
    BlogPostUpdate,
    BlogStats,
)
from rotations.services import blog

router = APIRouter(tags=["blog"])


# Public
@router.get("/blog-posts", response_model=List[BlogPost])
def read_published_posts(
    category: Optional[str] = Query(None, description="Category name; 'All' for every category"),
    db: Session = Depends(get_db)
):
    return blog.list_published_posts(db, category)


@router.get("/blog-posts/post/{slug}", response_model=BlogPost)
def read_published_post(slug: str, db: Session = Depends(get_db)):
    return blog.get_published_post(db, slug)


# Admin
@router.get("/cms/blog", response_model=List[BlogPost])
def read_posts(
    search: Optional[str] = Query(None, description="Matches title, content or author"),
    status: Optional[BlogPostStatus] = Query(None),
    category: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return blog.list_posts(db, current_admin, search=search, status=status, category=category)


# Declared before /cms/blog/{post_id} so "stats" is not read as an id
@router.get("/cms/blog/stats", response_model=BlogStats)
def read_blog_stats(
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return blog.blog_stats(db, current_admin)


@router.get("/cms/blog/{post_id}", response_model=BlogPost)
def read_post(
    post_id: RowId,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return blog.get_post(db, current_admin, post_id)


@router.post("/cms/blog", response_model=BlogPost, status_code=status.HTTP_201_CREATED)
def create_post(
    post: BlogPostCreate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return blog.create_post(db, current_admin, post)


@router.put("/cms/blog/{post_id}", response_model=BlogPost)
def update_post(
    post_id: RowId,
    post: BlogPostUpdate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return blog.update_post(db, current_admin, post_id, post)


@router.delete("/cms/blog/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: RowId,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    blog.delete_post(db, current_admin, post_id)
    return None


@router.get("/cms/blog-categories", response_model=List[BlogCategory])
def read_categories(db: Session = Depends(get_db)):
    return blog.list_categories(db)


@router.post("/cms/blog-categories", response_model=BlogCategory, status_code=status.HTTP_201_CREATED)
def create_category(
    category: BlogCategoryCreate,
    db: Session = Depends(get_db),
    current_admin: Actor = Depends(get_current_admin)
):
    return blog.create_category(db, current_admin, category)
