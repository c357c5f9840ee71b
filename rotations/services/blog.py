"""Blog posts and their categories.

Readers only ever see published posts. Everything else, including drafts and
archived posts, goes through the admin operations.
"""
import logging
from typing import List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rotations.core.errors import NotFound, ValidationError
from rotations.core.security import ensure_admin
from rotations.models.base import utc_now
from rotations.models.blog import BlogCategory, BlogPost, BlogPostStatus
from rotations.schemas.auth import Actor
from rotations.schemas.blog import BlogCategoryCreate, BlogPostCreate, BlogPostUpdate
from rotations.services.availability import like_pattern

logger = logging.getLogger(__name__)

# Category filter value meaning "every category"
ALL_CATEGORIES = "All"


def _published(db: Session):
    return db.query(BlogPost).filter(BlogPost.status == BlogPostStatus.PUBLISHED)


def list_published_posts(db: Session, category: Optional[str] = None) -> List[BlogPost]:
    query = _published(db)
    if category and category != ALL_CATEGORIES:
        query = query.filter(func.lower(BlogPost.category) == category.strip().lower())
    return query.order_by(BlogPost.published_at.desc(), BlogPost.id.desc()).all()


def get_published_post(db: Session, slug: str) -> BlogPost:
    post = _published(db).filter(BlogPost.slug == slug).first()
    if post is None:
        raise NotFound(f"Blog post '{slug}' not found")
    return post


def list_posts(
    db: Session,
    actor: Actor,
    search: Optional[str] = None,
    status: Optional[BlogPostStatus] = None,
    category: Optional[str] = None,
) -> List[BlogPost]:
    ensure_admin(actor, "manage the blog")
    query = db.query(BlogPost)
    if search:
        pattern = like_pattern(search.strip())
        query = query.filter(
            or_(
                BlogPost.title.ilike(pattern, escape="\\"),
                BlogPost.content.ilike(pattern, escape="\\"),
                BlogPost.author.ilike(pattern, escape="\\"),
            )
        )
    if status is not None:
        query = query.filter(BlogPost.status == status)
    if category and category != ALL_CATEGORIES:
        query = query.filter(func.lower(BlogPost.category) == category.strip().lower())
    return query.order_by(BlogPost.created_at.desc(), BlogPost.id.desc()).all()


def get_post(db: Session, actor: Actor, post_id: int) -> BlogPost:
    ensure_admin(actor, "manage the blog")
    post = db.get(BlogPost, post_id)
    if post is None:
        raise NotFound(f"Blog post {post_id} not found")
    return post


def _canonical_category(db: Session, name: str) -> str:
    category = (
        db.query(BlogCategory)
        .filter(func.lower(BlogCategory.name) == name.strip().lower())
        .first()
    )
    if category is None:
        raise ValidationError("category", f"Unknown blog category '{name}'")
    return category.name


def _commit_post(db: Session, post: BlogPost) -> BlogPost:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ValidationError("slug", f"Blog post slug '{post.slug}' already exists")
    db.refresh(post)
    return post


def create_post(db: Session, actor: Actor, data: BlogPostCreate) -> BlogPost:
    ensure_admin(actor, "manage the blog")
    fields = data.model_dump(mode="json", exclude={"status", "published_at", "category"})
    post = BlogPost(
        **fields,
        category=_canonical_category(db, data.category),
        status=data.status,
        created_by=actor.id,
    )
    if data.status == BlogPostStatus.PUBLISHED:
        post.published_at = data.published_at or utc_now()

    db.add(post)
    post = _commit_post(db, post)
    logger.info("Blog post %s (%s) created by %s", post.slug, post.status.value, actor.id)
    return post


def update_post(db: Session, actor: Actor, post_id: int, data: BlogPostUpdate) -> BlogPost:
    post = get_post(db, actor, post_id)
    changes = data.model_dump(mode="json", exclude_unset=True, exclude={"status", "published_at"})

    if changes.get("category") is not None:
        changes["category"] = _canonical_category(db, changes["category"])
    for key, value in changes.items():
        # Required columns keep their value when the client sends null
        if value is None and key in ("title", "slug", "content", "author", "category", "tags"):
            continue
        setattr(post, key, value)

    if data.status is not None:
        post.status = data.status
    if post.status == BlogPostStatus.PUBLISHED:
        post.published_at = data.published_at or post.published_at or utc_now()
    else:
        post.published_at = None

    return _commit_post(db, post)


def delete_post(db: Session, actor: Actor, post_id: int) -> None:
    post = get_post(db, actor, post_id)
    db.delete(post)
    db.commit()
    logger.info("Blog post %s deleted by %s", post_id, actor.id)


def blog_stats(db: Session, actor: Actor) -> dict:
    ensure_admin(actor, "view blog statistics")
    counts = dict(
        db.query(BlogPost.status, func.count(BlogPost.id))
        .group_by(BlogPost.status)
        .all()
    )
    stats = {status.value: counts.get(status, 0) for status in BlogPostStatus}
    stats["total"] = sum(stats.values())
    stats["categories"] = db.query(func.count(BlogCategory.id)).scalar()
    return stats


def list_categories(db: Session) -> List[BlogCategory]:
    return db.query(BlogCategory).order_by(BlogCategory.name.asc()).all()


def create_category(db: Session, actor: Actor, data: BlogCategoryCreate) -> BlogCategory:
    ensure_admin(actor, "manage the blog")
    name = data.name.strip()
    if db.query(BlogCategory).filter(func.lower(BlogCategory.name) == name.lower()).first():
        raise ValidationError("name", f"Blog category '{name}' already exists")

    category = BlogCategory(name=name, description=data.description)
    db.add(category)
    db.commit()
    db.refresh(category)
    return category
