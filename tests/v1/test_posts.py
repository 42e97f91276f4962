# tests/v1/test_posts.py
"""Tests for post-related endpoints."""

from fastapi import status
from sqlalchemy import select

from discusspedia.core.security import create_access_token
from discusspedia.models import Comment, Post, PostImage, PostLike, Questionnaire
from discusspedia.services.moderation import WordListModerationGate, get_moderation_gate

POSTS_URL = "/api/v1/posts/"


def _ids(response) -> list[int]:
    return [post["id"] for post in response.json()]


class TestListPosts:
    def test_newest_first_by_default(self, client, test_user, make_post) -> None:
        first = make_post(test_user, title="first")
        second = make_post(test_user, title="second")
        third = make_post(test_user, title="third")

        response = client.get(POSTS_URL)

        assert response.status_code == status.HTTP_200_OK
        assert _ids(response) == [third.id, second.id, first.id]

    def test_oldest(self, client, test_user, make_post) -> None:
        first = make_post(test_user)
        second = make_post(test_user)

        response = client.get(POSTS_URL, params={"sort_by": "oldest"})

        assert _ids(response) == [first.id, second.id]

    def test_most_liked_with_id_tiebreak(self, client, test_user, other_user, make_post) -> None:
        popular = make_post(test_user, liked_by=(test_user, other_user))
        tied_low = make_post(test_user, liked_by=(other_user,))
        tied_high = make_post(test_user, liked_by=(test_user,))
        unliked = make_post(test_user)

        response = client.get(POSTS_URL, params={"sort_by": "most_liked"})

        assert _ids(response) == [popular.id, tied_high.id, tied_low.id, unliked.id]
        assert [post["like_count"] for post in response.json()] == [2, 1, 1, 0]

    def test_most_commented(self, client, test_user, make_post) -> None:
        quiet = make_post(test_user, comments=1)
        busy = make_post(test_user, comments=3)

        response = client.get(POSTS_URL, params={"sort_by": "most_commented"})

        assert _ids(response) == [busy.id, quiet.id]
        assert [post["comment_count"] for post in response.json()] == [3, 1]

    def test_counts_are_not_multiplied_by_images(self, client, test_user, other_user, make_post) -> None:
        make_post(test_user, images=3, comments=2, liked_by=(test_user, other_user))

        post = client.get(POSTS_URL).json()[0]

        assert post["comment_count"] == 2
        assert post["like_count"] == 2
        assert len(post["images"]) == 3

    def test_questionnaires_are_excluded(self, client, test_user, make_post) -> None:
        post = make_post(test_user)
        make_post(test_user, link="https://forms.example.com/survey")

        assert _ids(client.get(POSTS_URL)) == [post.id]

    def test_filter_by_category(self, client, test_user, make_post, other_category) -> None:
        make_post(test_user)
        wanted = make_post(test_user, category_id=other_category.id)

        response = client.get(POSTS_URL, params={"category_id": str(other_category.id)})

        assert _ids(response) == [wanted.id]

    def test_category_zero_returns_all(self, client, test_user, make_post, other_category) -> None:
        make_post(test_user)
        make_post(test_user, category_id=other_category.id)

        assert len(client.get(POSTS_URL, params={"category_id": "0"}).json()) == 2

    def test_search_title_is_case_insensitive(self, client, test_user, make_post) -> None:
        make_post(test_user, title="Tips for Calculus")
        make_post(test_user, title="Physics lab")

        response = client.get(POSTS_URL, params={"search_title": "calc"})

        assert [post["title"] for post in response.json()] == ["Tips for Calculus"]

    def test_search_title_wildcards_are_literal(self, client, test_user, make_post) -> None:
        make_post(test_user, title="50% off textbooks")
        make_post(test_user, title="500 pages")

        response = client.get(POSTS_URL, params={"search_title": "50%"})

        assert [post["title"] for post in response.json()] == ["50% off textbooks"]

    def test_filter_by_me(self, client, test_user, other_user, auth_token, make_post) -> None:
        mine = make_post(test_user)
        make_post(other_user)

        response = client.get(POSTS_URL, params={"me": "true"}, headers=auth_token)

        assert _ids(response) == [mine.id]

    def test_filter_by_me_requires_token(self, client) -> None:
        response = client.get(POSTS_URL, params={"me": "true"})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "error" in response.json()

    def test_invalid_parameters(self, client) -> None:
        cases = {
            "sort_by": ("sideways", "Invalid Sort By"),
            "category_id": ("abc", "Invalid Filter By Category ID"),
            "me": ("perhaps", "Invalid Filter By Me"),
            "limit": ("0", "Invalid Limit"),
            "offset": ("-5", "Invalid Offset"),
        }
        for param, (value, message) in cases.items():
            response = client.get(POSTS_URL, params={param: value})
            assert response.status_code == status.HTTP_400_BAD_REQUEST
            assert response.json() == {"error": message}

    def test_pagination_counts_posts_not_images(self, client, test_user, make_post) -> None:
        gallery = make_post(test_user, images=3)
        second = make_post(test_user)
        make_post(test_user)

        response = client.get(POSTS_URL, params={"sort_by": "oldest", "limit": "2"})

        posts = response.json()
        assert [post["id"] for post in posts] == [gallery.id, second.id]
        assert len(posts[0]["images"]) == 3
        assert posts[1]["images"] == []

    def test_offset(self, client, test_user, make_post) -> None:
        make_post(test_user)
        middle = make_post(test_user)
        make_post(test_user)

        response = client.get(POSTS_URL, params={"limit": "1", "offset": "1"})

        assert _ids(response) == [middle.id]

    def test_viewer_flags(self, client, test_user, other_user, auth_token, other_auth_token, make_post) -> None:
        make_post(test_user, liked_by=(test_user,))

        mine = client.get(POSTS_URL, headers=auth_token).json()[0]
        theirs = client.get(POSTS_URL, headers=other_auth_token).json()[0]
        anonymous = client.get(POSTS_URL).json()[0]

        assert (mine["is_author"], mine["is_like"]) == (True, True)
        assert (theirs["is_author"], theirs["is_like"]) == (False, False)
        assert (anonymous["is_author"], anonymous["is_like"]) == (False, False)

    def test_invalid_token_reads_as_anonymous(self, client, test_user, make_post) -> None:
        make_post(test_user)

        response = client.get(POSTS_URL, headers={"Authorization": "Bearer garbage"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()[0]["is_author"] is False

    def test_author_block(self, client, test_user, other_user, make_post) -> None:
        make_post(test_user)
        make_post(other_user)

        posts = client.get(POSTS_URL, params={"sort_by": "oldest"}).json()

        assert posts[0]["author"] == {
            "id": test_user.id,
            "name": "Test User",
            "role": "student",
            "institute": "Institut Teknologi",
            "major": "Informatics",
            "batch": 2021,
            "profile_image": "media/avatar/test.png",
        }
        assert posts[1]["author"]["institute"] == ""
        assert posts[1]["author"]["batch"] == 0
        assert posts[1]["author"]["profile_image"] == ""

    def test_created_at_format(self, client, test_user, make_post) -> None:
        make_post(test_user)

        created_at = client.get(POSTS_URL).json()[0]["created_at"]

        assert len(created_at) == len("2024-01-01 08:00:00")
        assert created_at[10] == " "


class TestGetPost:
    def test_not_found(self, client) -> None:
        response = client.get(f"{POSTS_URL}999")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Post Not Found"}

    def test_post_without_images(self, client, test_user, make_post) -> None:
        post = make_post(test_user, title="Lonely")

        response = client.get(f"{POSTS_URL}{post.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["title"] == "Lonely"
        assert response.json()["images"] == []

    def test_post_with_images_in_insertion_order(self, client, test_user, make_post) -> None:
        post = make_post(test_user, images=2)

        images = client.get(f"{POSTS_URL}{post.id}").json()["images"]

        assert [image["url"] for image in images] == [
            f"media/post/{post.id}-0.png",
            f"media/post/{post.id}-1.png",
        ]


class TestCreatePost:
    def test_create(self, client, auth_token, test_user, category, db_session) -> None:
        response = client.post(
            POSTS_URL,
            json={"category_id": category.id, "title": "Hello", "description": "First post"},
            headers=auth_token,
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["message"] == "Post Created"
        post = db_session.get(Post, body["id"])
        assert post.author_id == test_user.id
        assert post.description == "First post"

    def test_requires_authentication(self, client, category) -> None:
        response = client.post(
            POSTS_URL,
            json={"category_id": category.id, "title": "Hello", "description": "Body"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_token_for_unknown_user(self, client, category) -> None:
        response = client.post(
            POSTS_URL,
            json={"category_id": category.id, "title": "Hello", "description": "Body"},
            headers={"Authorization": f"Bearer {create_access_token(12345)}"},
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json() == {"error": "User not found"}

    def test_bad_words_are_rejected(self, client, auth_token, category, db_session) -> None:
        response = client.post(
            POSTS_URL,
            json={"category_id": category.id, "title": "Hello", "description": "what the fuck"},
            headers=auth_token,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"error": "Your post contains bad words"}
        assert db_session.execute(select(Post)).first() is None

    def test_moderation_gate_is_injected(self, app, client, auth_token, category) -> None:
        app.dependency_overrides[get_moderation_gate] = lambda: WordListModerationGate(["pineapple"])
        try:
            rejected = client.post(
                POSTS_URL,
                json={"category_id": category.id, "title": "Pineapple pizza", "description": "Body"},
                headers=auth_token,
            )
            accepted = client.post(
                POSTS_URL,
                json={"category_id": category.id, "title": "Hello", "description": "what the fuck"},
                headers=auth_token,
            )
        finally:
            app.dependency_overrides.pop(get_moderation_gate, None)

        assert rejected.status_code == status.HTTP_400_BAD_REQUEST
        assert accepted.status_code == status.HTTP_201_CREATED

    def test_unknown_category(self, client, auth_token) -> None:
        response = client.post(
            POSTS_URL,
            json={"category_id": 999, "title": "Hello", "description": "Body"},
            headers=auth_token,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Category Not Found"}

    def test_validation_errors(self, client, auth_token, category) -> None:
        response = client.post(
            POSTS_URL,
            json={"category_id": category.id, "title": "", "description": "Body"},
            headers=auth_token,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        errors = response.json()["errors"]
        assert len(errors) == 1
        assert errors[0].startswith("title:")


class TestUpdatePost:
    def _payload(self, category, **overrides):
        payload = {"category_id": category.id, "title": "Edited", "description": "Edited body"}
        payload.update(overrides)
        return payload

    def test_owner_can_update(self, client, auth_token, test_user, category, make_post) -> None:
        post = make_post(test_user)

        response = client.put(f"{POSTS_URL}{post.id}", json=self._payload(category), headers=auth_token)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Post Updated"}
        assert client.get(f"{POSTS_URL}{post.id}").json()["title"] == "Edited"

    def test_other_user_is_forbidden(self, client, other_auth_token, test_user, category, make_post) -> None:
        post = make_post(test_user)

        response = client.put(f"{POSTS_URL}{post.id}", json=self._payload(category), headers=other_auth_token)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json() == {"error": "You are not the owner of this post"}

    def test_missing_post(self, client, auth_token, category) -> None:
        response = client.put(f"{POSTS_URL}999", json=self._payload(category), headers=auth_token)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_ownership_is_checked_before_moderation(
        self, client, other_auth_token, test_user, category, make_post
    ) -> None:
        post = make_post(test_user)

        response = client.put(
            f"{POSTS_URL}{post.id}",
            json=self._payload(category, title="shit"),
            headers=other_auth_token,
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owner_bad_words(self, client, auth_token, test_user, category, make_post) -> None:
        post = make_post(test_user, title="Original")

        response = client.put(
            f"{POSTS_URL}{post.id}",
            json=self._payload(category, title="shit"),
            headers=auth_token,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert client.get(f"{POSTS_URL}{post.id}").json()["title"] == "Original"


class TestDeletePost:
    def test_owner_can_delete(self, client, auth_token, test_user, make_post, db_session) -> None:
        post = make_post(test_user, images=2)

        response = client.delete(f"{POSTS_URL}{post.id}", headers=auth_token)

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"message": "Post Deleted"}
        assert client.get(f"{POSTS_URL}{post.id}").status_code == status.HTTP_404_NOT_FOUND
        assert db_session.execute(select(PostImage).where(PostImage.post_id == post.id)).first() is None

    def test_other_user_is_forbidden(self, client, other_auth_token, test_user, make_post) -> None:
        post = make_post(test_user)

        response = client.delete(f"{POSTS_URL}{post.id}", headers=other_auth_token)

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert client.get(f"{POSTS_URL}{post.id}").status_code == status.HTTP_200_OK

    def test_missing_post(self, client, auth_token) -> None:
        response = client.delete(f"{POSTS_URL}999", headers=auth_token)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"error": "Post Not Found"}

    def test_likes_and_comments_go_with_the_post(
        self, client, auth_token, test_user, other_user, category, make_post, db_session
    ) -> None:
        post = make_post(test_user, liked_by=(test_user, other_user), comments=2)

        client.delete(f"{POSTS_URL}{post.id}", headers=auth_token)

        assert db_session.execute(select(PostLike).where(PostLike.post_id == post.id)).first() is None
        assert db_session.execute(select(Comment).where(Comment.post_id == post.id)).first() is None

        created = client.post(
            POSTS_URL,
            json={"category_id": category.id, "title": "Fresh", "description": "Brand new"},
            headers=auth_token,
        ).json()
        fresh = client.get(f"{POSTS_URL}{created['id']}", headers=auth_token).json()

        assert fresh["like_count"] == 0
        assert fresh["comment_count"] == 0
        assert fresh["is_like"] is False


class TestQuestionnaireIdsOnPostRoutes:
    """A questionnaire shares the posts table but is not a post."""

    def test_delete_is_not_found(self, client, auth_token, test_user, make_post, db_session) -> None:
        questionnaire = make_post(test_user, link="https://forms.example.com/survey")

        response = client.delete(f"{POSTS_URL}{questionnaire.id}", headers=auth_token)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert db_session.execute(
            select(Questionnaire).where(Questionnaire.post_id == questionnaire.id)
        ).first() is not None
        assert client.get(f"/api/v1/questionnaires/{questionnaire.id}").status_code == status.HTTP_200_OK

    def test_update_is_not_found(self, client, auth_token, test_user, category, make_post) -> None:
        questionnaire = make_post(test_user, title="Survey", link="https://forms.example.com/survey")

        response = client.put(
            f"{POSTS_URL}{questionnaire.id}",
            json={"category_id": category.id, "title": "Hijacked", "description": "Body"},
            headers=auth_token,
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert client.get(f"/api/v1/questionnaires/{questionnaire.id}").json()["title"] == "Survey"
