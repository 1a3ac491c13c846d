"""
HTTP surface: viewer resolution from the bearer token, envelopes and
status codes.
"""
from sqlalchemy import select

from model.social.models import Post
from src.utils import NOT_AUTHENTICATED, make_session_token


class TestViewerResolution:

    def test_health(self, client):
        assert client.get("/health").json() == {"ok": True}

    def test_invalid_token_is_anonymous(self, client):
        response = client.post("/v1/social/posts", json={"content": "hola"}, headers={"Authorization": "Bearer nope"})
        assert response.status_code == 201
        assert response.json() == {"success": False, "error": NOT_AUTHENTICATED, "post": None}

    def test_token_for_unknown_user_is_anonymous(self, client):
        headers = {"Authorization": f"Bearer {make_session_token('user_clerk_ghost')}"}
        assert client.get("/v1/notifications/unread-count", headers=headers).json() == {"unread_count": 0}

    def test_security_headers(self, client):
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"


class TestSocialRoutes:

    def test_post_like_comment_flow(self, client, db_session, make_user, auth_headers):
        author, fan = make_user("autora"), make_user("fan")

        created = client.post("/v1/social/posts", json={"content": "Compost casero"}, headers=auth_headers(author))
        assert created.status_code == 201
        post_id = created.json()["post"]["id"]

        like = client.post(f"/v1/social/posts/{post_id}/like", headers=auth_headers(fan))
        assert like.json()["liked"] is True
        assert like.json()["like_count"] == 1

        comment = client.post(
            f"/v1/social/posts/{post_id}/comments", json={"content": "Genial"}, headers=auth_headers(fan)
        )
        assert comment.status_code == 201
        assert comment.json()["comment"]["author"]["username"] == "fan"

        unread = client.get("/v1/notifications/unread-count", headers=auth_headers(author))
        assert unread.json() == {"unread_count": 2}

        listing = client.get("/v1/notifications", headers=auth_headers(author)).json()
        ids = [n["id"] for n in listing["notifications"]]
        client.post("/v1/notifications/read", json={"notification_ids": ids}, headers=auth_headers(author))
        assert client.get("/v1/notifications/unread-count", headers=auth_headers(author)).json()["unread_count"] == 0

    def test_feed_page_parameters(self, client, make_user, make_post, auth_headers):
        viewer = make_user()
        for i in range(3):
            make_post(viewer, f"p{i}", minutes=i)

        body = client.get("/v1/social/feed?page=2&page_size=2", headers=auth_headers(viewer)).json()
        assert body["success"] is True
        assert body["current_page"] == 2
        assert [p["content"] for p in body["posts"]] == ["p0"]

    def test_explore_posts_query_list(self, client, make_company, make_post):
        farm = make_company("granja", categories=["Agricultura"])
        shop = make_company("tienda", categories=["Moda"])
        make_post(farm, "a")
        make_post(shop, "b")
        body = client.get("/v1/social/posts?categories=Moda&categories=Energía").json()
        assert [p["author"]["username"] for p in body["posts"]] == ["tienda"]

    def test_delete_requires_author(self, client, db_session, make_user, make_post, auth_headers):
        author, other = make_user(), make_user()
        post = make_post(author)
        response = client.delete(f"/v1/social/posts/{post.id}", headers=auth_headers(other))
        assert response.json()["error"] == "Unauthorized to delete this post"
        assert db_session.scalar(select(Post.id)) == post.id


class TestUserRoutes:

    def test_follow_and_stats(self, client, make_user, make_company, auth_headers):
        fan, company = make_user(), make_company()
        response = client.post(f"/v1/users/{company.id}/follow", headers=auth_headers(fan))
        assert response.json()["is_following"] is True

        stats = client.get(f"/v1/users/{company.id}/follow-stats", headers=auth_headers(fan)).json()
        assert stats["follower_count"] == 1
        assert stats["is_following"] is True

    def test_follow_stats_bad_ids(self, client):
        assert client.get("/v1/users/not-an-id/follow-stats").status_code == 400
        assert client.get("/v1/users/USR-1700000000-AAAAAAAA/follow-stats").status_code == 404

    def test_suggestions_route_not_shadowed_by_profile(self, client, make_user, make_company, auth_headers):
        viewer = make_user()
        make_company("verde")
        body = client.get("/v1/users/suggestions", headers=auth_headers(viewer)).json()
        assert [c["username"] for c in body] == ["verde"]

    def test_profile_and_patch(self, client, make_user, auth_headers):
        user = make_user("perfil")
        patched = client.patch("/v1/users/me", json={"bio": "Hola"}, headers=auth_headers(user))
        assert patched.json()["success"] is True

        profile = client.get("/v1/users/perfil").json()
        assert profile["profile"]["bio"] == "Hola"
        assert client.get("/v1/users/nadie").json()["success"] is False


class TestFeedbackRoutes:

    def test_admin_only_listing(self, client, make_user, auth_headers):
        admin, regular = make_user("admin"), make_user("regular")
        client.post("/v1/feedback", json={"content": "Gracias"})

        assert client.get("/v1/feedback").status_code == 401
        assert client.get("/v1/feedback", headers=auth_headers(regular)).status_code == 403
        listing = client.get("/v1/feedback", headers=auth_headers(admin))
        assert listing.status_code == 200
        assert [f["content"] for f in listing.json()["feedbacks"]] == ["Gracias"]

    def test_enrollment_validation(self, client):
        response = client.post("/v1/enrollment", json={"company_name": "Eco"})
        assert response.json() == {"success": False, "error": "Debe seleccionar una industria."}
