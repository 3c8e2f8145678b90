"""Tests for cross-partition resolution and listings."""

import pytest

from galleria.content import ContentRepository, LifecycleEngine, QueryLayer
from galleria.errors import CommentNotFound, GalleryNotFound, PostNotFound
from galleria.types import Document, GalleryFields, GalleryPatch, Post, PostFields, PostPatch

ALICE = "u_alice"
BOB = "u_bob"
CAROL = "u_carol"


class TestResolve:
    """Tests for resolve_gallery / resolve_post / resolve_comment."""

    def test_resolve_with_and_without_hint(
        self, repo: ContentRepository, queries: QueryLayer
    ) -> None:
        gallery = repo.create_gallery(BOB, BOB, GalleryFields(title="Bob's"))

        for hint in (BOB, None, ALICE, "u_nobody"):
            entry = queries.resolve_gallery(gallery.id, hint)
            assert entry.owner_id == BOB
            assert entry.owner_name == "bob"
            assert entry.gallery is gallery

    def test_resolve_missing(self, queries: QueryLayer) -> None:
        with pytest.raises(GalleryNotFound):
            queries.resolve_gallery("g_missing")
        with pytest.raises(PostNotFound):
            queries.resolve_post("p_missing", ALICE)
        with pytest.raises(CommentNotFound):
            queries.resolve_comment("c_missing")

    def test_unknown_hint_creates_no_partition(
        self, repo: ContentRepository, queries: QueryLayer, document: Document
    ) -> None:
        gallery = repo.create_gallery(BOB, BOB, GalleryFields())
        queries.resolve_gallery(gallery.id, "u_nobody")
        assert "u_nobody" not in document.user_data

    def test_resolve_post_and_comment(
        self, repo: ContentRepository, queries: QueryLayer
    ) -> None:
        gallery = repo.create_gallery(ALICE, ALICE, GalleryFields())
        post = repo.create_post(BOB, BOB, PostFields(gallery_id=gallery.id))
        comment = repo.create_comment(CAROL, CAROL, post.id, "hi")

        assert queries.resolve_post(post.id).author_id == BOB
        assert queries.resolve_post(post.id, BOB).author_name == "bob"
        assert queries.resolve_comment(comment.id).author_id == CAROL

    def test_deleted_user_displays_as_unknown(
        self, repo: ContentRepository, queries: QueryLayer, document: Document
    ) -> None:
        gallery = repo.create_gallery(BOB, BOB, GalleryFields())
        del document.users[BOB]
        assert queries.resolve_gallery(gallery.id).owner_name == "unknown"


class TestListGalleries:
    """Tests for list_galleries sort and search."""

    def test_pinned_first_then_recent(
        self, repo: ContentRepository, queries: QueryLayer
    ) -> None:
        old = repo.create_gallery(ALICE, ALICE, GalleryFields(title="old"))
        pinned = repo.create_gallery(BOB, BOB, GalleryFields(title="pinned", pinned=True))
        new = repo.create_gallery(CAROL, CAROL, GalleryFields(title="new"))

        ids = [e.gallery.id for e in queries.list_galleries()]

        assert ids == [pinned.id, new.id, old.id]

    def test_update_moves_gallery_up(self, repo: ContentRepository, queries: QueryLayer) -> None:
        first = repo.create_gallery(ALICE, ALICE, GalleryFields(title="first"))
        second = repo.create_gallery(ALICE, ALICE, GalleryFields(title="second"))
        repo.update_gallery(ALICE, ALICE, first.id, GalleryPatch(description="touched"))

        assert [e.gallery.id for e in queries.list_galleries()] == [first.id, second.id]

    def test_deleted_hidden_by_default(
        self, repo: ContentRepository, lifecycle: LifecycleEngine, queries: QueryLayer
    ) -> None:
        keep = repo.create_gallery(ALICE, ALICE, GalleryFields(title="keep"))
        gone = repo.create_gallery(ALICE, ALICE, GalleryFields(title="gone"))
        lifecycle.delete_gallery(ALICE, ALICE, gone.id)

        assert [e.gallery.id for e in queries.list_galleries()] == [keep.id]
        assert {e.gallery.id for e in queries.list_galleries(include_deleted=True)} == {
            keep.id,
            gone.id,
        }

    def test_include_deleted_ignores_pinning(
        self, repo: ContentRepository, queries: QueryLayer
    ) -> None:
        pinned = repo.create_gallery(ALICE, ALICE, GalleryFields(title="p", pinned=True))
        newer = repo.create_gallery(ALICE, ALICE, GalleryFields(title="n"))

        ids = [e.gallery.id for e in queries.list_galleries(include_deleted=True)]

        assert ids == [newer.id, pinned.id]

    def test_search_title_description_owner(
        self, repo: ContentRepository, queries: QueryLayer
    ) -> None:
        repo.create_gallery(ALICE, ALICE, GalleryFields(title="Summer TRIP"))
        repo.create_gallery(ALICE, ALICE, GalleryFields(description="a trip to the sea"))
        repo.create_gallery(BOB, BOB, GalleryFields(title="Recipes"))

        assert len(queries.list_galleries(query="trip")) == 2
        assert len(queries.list_galleries(query="BOB")) == 1
        assert len(queries.list_galleries(query="  ")) == 3
        assert queries.list_galleries(query="nothing") == []

    def test_search_does_not_span_fields(
        self, repo: ContentRepository, queries: QueryLayer
    ) -> None:
        repo.create_gallery(ALICE, ALICE, GalleryFields(title="Beach", description="party"))

        assert queries.list_galleries(query="beach\nparty") == []
        assert len(queries.list_galleries(query="beach")) == 1


class TestListPostsAndComments:
    """Tests for list_posts_in_gallery, list_comments_for_post and comment_count."""

    def test_posts_from_every_author(
        self, repo: ContentRepository, lifecycle: LifecycleEngine, queries: QueryLayer
    ) -> None:
        gallery = repo.create_gallery(ALICE, ALICE, GalleryFields())
        other = repo.create_gallery(ALICE, ALICE, GalleryFields())
        a = repo.create_post(ALICE, ALICE, PostFields(gallery_id=gallery.id, title="a"))
        b = repo.create_post(BOB, BOB, PostFields(gallery_id=gallery.id, title="b"))
        repo.create_post(BOB, BOB, PostFields(gallery_id=other.id, title="elsewhere"))
        c = repo.create_post(CAROL, CAROL, PostFields(gallery_id=gallery.id, title="c"))
        lifecycle.delete_post(CAROL, CAROL, c.id)

        live = queries.list_posts_in_gallery(ALICE, gallery.id)
        everything = queries.list_posts_in_gallery(ALICE, gallery.id, include_deleted=True)

        assert [e.post.id for e in live] == [b.id, a.id]
        assert all(e.post.deleted_at is None for e in live)
        assert [e.post.id for e in everything] == [c.id, b.id, a.id]

    def test_search_posts_by_content_and_author(
        self, repo: ContentRepository, queries: QueryLayer
    ) -> None:
        gallery = repo.create_gallery(ALICE, ALICE, GalleryFields())
        repo.create_post(ALICE, ALICE, PostFields(gallery_id=gallery.id, content="Sunset"))
        repo.create_post(BOB, BOB, PostFields(gallery_id=gallery.id, content="sunrise"))

        assert len(queries.list_posts_in_gallery(ALICE, gallery.id, query="sun")) == 2
        assert len(queries.list_posts_in_gallery(ALICE, gallery.id, query="bob")) == 1

    def test_legacy_post_without_gallery_owner(
        self, repo: ContentRepository, queries: QueryLayer, document: Document
    ) -> None:
        """A post with no galleryOwnerId belongs to a gallery of its own author."""
        gallery = repo.create_gallery(BOB, BOB, GalleryFields())
        legacy = Post.model_validate(
            {
                "id": "p_legacy",
                "galleryId": gallery.id,
                "title": "old",
                "createdAt": "2023-01-01T00:00:00.000Z",
                "updatedAt": "2023-01-01T00:00:00.000Z",
            }
        )
        document.user_data[BOB].posts[legacy.id] = legacy

        assert [e.post.id for e in queries.list_posts_in_gallery(BOB, gallery.id)] == [
            "p_legacy"
        ]
        assert queries.list_posts_in_gallery(ALICE, gallery.id) == []

    def test_comments_chronological(
        self, repo: ContentRepository, lifecycle: LifecycleEngine, queries: QueryLayer
    ) -> None:
        gallery = repo.create_gallery(ALICE, ALICE, GalleryFields())
        post = repo.create_post(ALICE, ALICE, PostFields(gallery_id=gallery.id))
        first = repo.create_comment(CAROL, CAROL, post.id, "1")
        second = repo.create_comment(BOB, BOB, post.id, "2")
        third = repo.create_comment(CAROL, CAROL, post.id, "3")
        lifecycle.delete_comment(BOB, BOB, second.id)

        live = queries.list_comments_for_post(post.id)
        everything = queries.list_comments_for_post(post.id, include_deleted=True)

        assert [e.comment.id for e in live] == [first.id, third.id]
        assert [e.comment.id for e in everything] == [first.id, second.id, third.id]
        assert queries.comment_count(post.id) == 2


class TestTrashAndMeta:
    """Tests for list_trash and compute_gallery_meta."""

    def test_trash_sorted_by_deletion(
        self, repo: ContentRepository, lifecycle: LifecycleEngine, queries: QueryLayer
    ) -> None:
        g1 = repo.create_gallery(ALICE, ALICE, GalleryFields(title="one"))
        g2 = repo.create_gallery(BOB, BOB, GalleryFields(title="two"))
        keep = repo.create_gallery(ALICE, ALICE, GalleryFields(title="keep"))
        p1 = repo.create_post(CAROL, CAROL, PostFields(gallery_id=keep.id, title="p1"))
        p2 = repo.create_post(CAROL, CAROL, PostFields(gallery_id=keep.id, title="p2"))

        lifecycle.delete_gallery(BOB, BOB, g2.id)
        lifecycle.delete_post(CAROL, CAROL, p2.id)
        lifecycle.delete_gallery(ALICE, ALICE, g1.id)
        lifecycle.delete_post(CAROL, CAROL, p1.id)

        trash = queries.list_trash()

        assert [e.gallery.id for e in trash.galleries] == [g1.id, g2.id]
        assert [e.post.id for e in trash.posts] == [p1.id, p2.id]
        assert [e.gallery.id for e in queries.list_trash("two").galleries] == [g2.id]

    def test_gallery_meta(
        self, repo: ContentRepository, lifecycle: LifecycleEngine, queries: QueryLayer
    ) -> None:
        gallery = repo.create_gallery(ALICE, ALICE, GalleryFields())
        empty = queries.compute_gallery_meta(ALICE, gallery.id)
        assert (empty.alive_count, empty.tombstoned_count, empty.latest_activity) == (0, 0, None)

        a = repo.create_post(ALICE, ALICE, PostFields(gallery_id=gallery.id))
        b = repo.create_post(BOB, BOB, PostFields(gallery_id=gallery.id))
        repo.update_post(ALICE, ALICE, a.id, PostPatch(title="edited"))
        lifecycle.delete_post(BOB, BOB, b.id)

        meta = queries.compute_gallery_meta(ALICE, gallery.id)

        assert meta.alive_count == 1
        assert meta.tombstoned_count == 1
        assert meta.latest_activity == a.updated_at
