from datetime import datetime

import pytest
from pydantic import ValidationError as PydanticValidationError

from rotations.core.errors import NotFound, PermissionDenied, ValidationError
from rotations.models.blog import BlogPostStatus
from rotations.schemas.blog import BlogCategoryCreate, BlogPostCreate, BlogPostUpdate
from rotations.services import blog


@pytest.fixture
def categories(test_db, admin):
    return [
        blog.create_category(test_db, admin, BlogCategoryCreate(name=name))
        for name in ("Residency Tips", "News")
    ]


@pytest.fixture
def make_post(test_db, admin, categories):
    counter = {"n": 0}

    def _make(**overrides):
        counter["n"] += 1
        fields = dict(
            title=f"Post number {counter['n']}",
            slug=f"post-{counter['n']}",
            content="<p>Body</p>",
            author="Editorial Team",
            category="News",
            status="published",
        )
        fields.update(overrides)
        return blog.create_post(test_db, admin, BlogPostCreate(**fields))

    return _make


# Public reads

def test_published_list_is_newest_first_and_filterable(test_db, make_post):
    older = make_post(category="Residency Tips", published_at=datetime(2030, 1, 1))
    newer = make_post(published_at=datetime(2030, 2, 1))
    make_post(status="draft")
    make_post(status="archived")

    assert [p.id for p in blog.list_published_posts(test_db)] == [newer.id, older.id]
    assert [p.id for p in blog.list_published_posts(test_db, "All")] == [newer.id, older.id]
    assert [p.id for p in blog.list_published_posts(test_db, "residency tips")] == [older.id]


def test_only_published_post_is_readable_by_slug(test_db, make_post):
    make_post(slug="live-post")
    make_post(slug="draft-post", status="draft")

    assert blog.get_published_post(test_db, "live-post").slug == "live-post"
    with pytest.raises(NotFound):
        blog.get_published_post(test_db, "draft-post")
    with pytest.raises(NotFound):
        blog.get_published_post(test_db, "no-such-post")


# Admin writes

def test_publishing_stamps_published_at(make_post):
    post = make_post()
    draft = make_post(status="draft")

    assert post.published_at is not None
    assert draft.published_at is None


def test_category_is_canonicalised_and_must_exist(make_post):
    post = make_post(category="residency TIPS")
    assert post.category == "Residency Tips"

    with pytest.raises(ValidationError) as exc_info:
        make_post(category="Gossip")
    assert exc_info.value.field == "category"


def test_duplicate_post_slug(make_post):
    make_post(slug="same-slug")

    with pytest.raises(ValidationError) as exc_info:
        make_post(slug="same-slug")

    assert exc_info.value.field == "slug"


def test_bad_slug_is_refused_by_schema():
    with pytest.raises(PydanticValidationError):
        BlogPostCreate(title="Spaces in slug", slug="Not A Slug", content="x", author="Ed", category="News")


def test_status_change_moves_published_at(test_db, admin, make_post):
    draft = make_post(status="draft")

    published = blog.update_post(test_db, admin, draft.id, BlogPostUpdate(status="published"))
    assert published.published_at is not None
    stamp = published.published_at

    retitled = blog.update_post(test_db, admin, draft.id, BlogPostUpdate(title="A better title"))
    assert retitled.published_at == stamp

    archived = blog.update_post(test_db, admin, draft.id, BlogPostUpdate(status="archived"))
    assert archived.status == BlogPostStatus.ARCHIVED
    assert archived.published_at is None


def test_admin_list_filters(test_db, admin, make_post):
    make_post(title="Surviving night shifts", category="Residency Tips")
    make_post(title="Clinic news roundup", status="draft")

    assert len(blog.list_posts(test_db, admin)) == 2
    assert [p.title for p in blog.list_posts(test_db, admin, search="night")] == ["Surviving night shifts"]
    assert [p.title for p in blog.list_posts(test_db, admin, status=BlogPostStatus.DRAFT)] == ["Clinic news roundup"]
    assert len(blog.list_posts(test_db, admin, category="News")) == 1


def test_blog_is_admin_only(test_db, learner, make_post):
    post = make_post()

    with pytest.raises(PermissionDenied):
        blog.list_posts(test_db, learner)
    with pytest.raises(PermissionDenied):
        blog.delete_post(test_db, learner, post.id)
    with pytest.raises(PermissionDenied):
        blog.create_category(test_db, learner, BlogCategoryCreate(name="Opinion"))


def test_delete_post(test_db, admin, make_post):
    post = make_post()

    blog.delete_post(test_db, admin, post.id)

    with pytest.raises(NotFound):
        blog.get_post(test_db, admin, post.id)


def test_stats(test_db, admin, make_post):
    make_post()
    make_post()
    make_post(status="draft")

    assert blog.blog_stats(test_db, admin) == {
        "total": 3, "published": 2, "draft": 1, "archived": 0, "categories": 2,
    }


def test_duplicate_category_ignores_case(test_db, admin, categories):
    with pytest.raises(ValidationError) as exc_info:
        blog.create_category(test_db, admin, BlogCategoryCreate(name="news"))

    assert exc_info.value.field == "name"
    assert [c.name for c in blog.list_categories(test_db)] == ["News", "Residency Tips"]
