# tests/routes/test_blog_routes.py
"""Tests for the /blog endpoints: ownership, listing, search and likes."""

from typing import Any
from uuid import uuid4

from httpx import AsyncClient

from tests.conftest import AuthedUser


async def publish(client: AsyncClient, user: AuthedUser, **fields: Any) -> dict[str, Any]:
    payload = {"title": "Hello world", "content": "First post", **fields}
    response = await client.post("/blog/publish", headers=user.headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["blog"]


class TestPublish:
    """POST /blog/publish."""

    async def test_publish_defaults(self, client: AsyncClient, author: AuthedUser) -> None:
        response = await client.post(
            "/blog/publish",
            headers=author.headers,
            json={"title": "Hello world", "content": "First post", "tags": ["Python", "python"]},
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Blog uploaded to db"
        blog = body["blog"]
        assert blog["authorId"] == author.id
        assert blog["status"] == "draft"
        assert blog["tags"] == ["python"]
        assert blog["likes"] == 0
        assert blog["likedBy"] == []

    async def test_publish_requires_token(self, client: AsyncClient) -> None:
        response = await client.post(
            "/blog/publish",
            json={"title": "Hello world", "content": "First post"},
        )
        assert response.status_code == 401

    async def test_missing_title(self, client: AsyncClient, author: AuthedUser) -> None:
        response = await client.post(
            "/blog/publish",
            headers=author.headers,
            json={"content": "No title"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "title: Field required"

    async def test_author_id_in_body_is_ignored(
        self,
        client: AsyncClient,
        author: AuthedUser,
        reader: AuthedUser,
    ) -> None:
        blog = await publish(client, author, authorId=reader.id, likes=50)

        assert blog["authorId"] == author.id
        assert blog["likes"] == 0


class TestUpdate:
    """PUT /blog/update/{blog_id}."""

    async def test_author_can_update(self, client: AsyncClient, author: AuthedUser) -> None:
        blog = await publish(client, author)

        response = await client.put(
            f"/blog/update/{blog['id']}",
            headers=author.headers,
            json={"title": "Edited", "status": "published", "tags": ["News"]},
        )

        assert response.status_code == 200
        updated = response.json()["blog"]
        assert updated["title"] == "Edited"
        assert updated["status"] == "published"
        assert updated["tags"] == ["news"]
        assert updated["content"] == "First post"
        assert updated["updatedAt"] is not None

    async def test_non_author_is_forbidden(
        self,
        client: AsyncClient,
        author: AuthedUser,
        reader: AuthedUser,
    ) -> None:
        blog = await publish(client, author)

        response = await client.put(
            f"/blog/update/{blog['id']}",
            headers=reader.headers,
            json={"title": "Hijacked"},
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. You are not the author of this blog."
        fetched = await client.get(f"/blog/{blog['id']}")
        assert fetched.json()["blog"]["title"] == "Hello world"

    async def test_likes_cannot_be_set(self, client: AsyncClient, author: AuthedUser) -> None:
        blog = await publish(client, author)

        response = await client.put(
            f"/blog/update/{blog['id']}",
            headers=author.headers,
            json={"likes": 100},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Field(s) likes cannot be updated directly"

    async def test_unknown_blog(self, client: AsyncClient, author: AuthedUser) -> None:
        response = await client.put(
            f"/blog/update/{uuid4()}",
            headers=author.headers,
            json={"title": "Edited"},
        )

        assert response.status_code == 404
        assert response.json()["message"] == "Blog not found"

    async def test_malformed_id(self, client: AsyncClient, author: AuthedUser) -> None:
        response = await client.put(
            "/blog/update/not-an-id",
            headers=author.headers,
            json={"title": "Edited"},
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID format."


class TestDelete:
    """DELETE /blog/delete?id=."""

    async def test_author_can_delete(self, client: AsyncClient, author: AuthedUser) -> None:
        blog = await publish(client, author)

        response = await client.delete("/blog/delete", params={"id": blog["id"]}, headers=author.headers)

        assert response.status_code == 200
        assert response.json() == {"message": "Blog deleted successfully!"}
        assert (await client.get(f"/blog/{blog['id']}")).status_code == 404

    async def test_non_author_is_forbidden(
        self,
        client: AsyncClient,
        author: AuthedUser,
        reader: AuthedUser,
    ) -> None:
        blog = await publish(client, author)

        response = await client.delete("/blog/delete", params={"id": blog["id"]}, headers=reader.headers)

        assert response.status_code == 403
        assert (await client.get(f"/blog/{blog['id']}")).status_code == 200

    async def test_id_is_required(self, client: AsyncClient, author: AuthedUser) -> None:
        response = await client.delete("/blog/delete", headers=author.headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Blog ID is required"

    async def test_malformed_id(self, client: AsyncClient, author: AuthedUser) -> None:
        response = await client.delete("/blog/delete", params={"id": "42"}, headers=author.headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID format."


class TestLikes:
    """PUT /blog/like/{blog_id} and /blog/unlike/{blog_id}."""

    async def test_like_is_idempotent(
        self,
        client: AsyncClient,
        author: AuthedUser,
        reader: AuthedUser,
    ) -> None:
        blog = await publish(client, author)

        first = await client.put(f"/blog/like/{blog['id']}", headers=reader.headers)
        second = await client.put(f"/blog/like/{blog['id']}", headers=reader.headers)

        assert first.status_code == 200
        assert second.json()["blog"]["likes"] == 1
        assert second.json()["blog"]["likedBy"] == [reader.id]

    async def test_unlike_restores_state(
        self,
        client: AsyncClient,
        author: AuthedUser,
        reader: AuthedUser,
    ) -> None:
        blog = await publish(client, author)
        await client.put(f"/blog/like/{blog['id']}", headers=reader.headers)
        await client.put(f"/blog/like/{blog['id']}", headers=author.headers)

        response = await client.put(f"/blog/unlike/{blog['id']}", headers=reader.headers)
        again = await client.put(f"/blog/unlike/{blog['id']}", headers=reader.headers)

        assert response.json()["blog"]["likes"] == 1
        assert again.json()["blog"]["likes"] == 1
        assert again.json()["blog"]["likedBy"] == [author.id]

    async def test_unlike_never_goes_negative(self, client: AsyncClient, author: AuthedUser) -> None:
        blog = await publish(client, author)

        response = await client.put(f"/blog/unlike/{blog['id']}", headers=author.headers)

        assert response.json()["blog"]["likes"] == 0

    async def test_like_unknown_blog(self, client: AsyncClient, reader: AuthedUser) -> None:
        response = await client.put(f"/blog/like/{uuid4()}", headers=reader.headers)
        assert response.status_code == 404


class TestListing:
    """GET /blog/allblogs."""

    async def test_second_page(self, client: AsyncClient, author: AuthedUser) -> None:
        for index in range(15):
            await publish(client, author, title=f"Post {index}")

        response = await client.get("/blog/allblogs", params={"page": 2, "limit": 10})

        assert response.status_code == 200
        body = response.json()
        assert len(body["blogs"]) == 5
        assert body["page"] == 2
        assert body["limit"] == 10
        assert body["totalBlogs"] == 15
        assert body["totalPages"] == 2

    async def test_non_numeric_paging_uses_defaults(
        self,
        client: AsyncClient,
        author: AuthedUser,
    ) -> None:
        await publish(client, author)

        response = await client.get("/blog/allblogs", params={"page": "abc", "limit": "-1"})

        body = response.json()
        assert body["page"] == 1
        assert body["limit"] == 10
        assert body["totalPages"] == 1

    async def test_newest_first(self, client: AsyncClient, author: AuthedUser) -> None:
        await publish(client, author, title="Older")
        await publish(client, author, title="Newer")

        response = await client.get("/blog/allblogs")

        assert [blog["title"] for blog in response.json()["blogs"]] == ["Newer", "Older"]

    async def test_empty(self, client: AsyncClient) -> None:
        body = (await client.get("/blog/allblogs")).json()

        assert body["blogs"] == []
        assert body["totalBlogs"] == 0
        assert body["totalPages"] == 0


class TestFetchOne:
    """GET /blog/{blog_id}."""

    async def test_blog_is_populated(self, client: AsyncClient, author: AuthedUser) -> None:
        blog = await publish(client, author)

        response = await client.get(f"/blog/{blog['id']}")

        assert response.status_code == 200
        fetched = response.json()["blog"]
        assert fetched["author"] == {"id": author.id, "username": "author", "profilePic": None}
        assert fetched["comments"] == []

    async def test_unknown_blog(self, client: AsyncClient) -> None:
        response = await client.get(f"/blog/{uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"status": "fail", "message": "Blog not found"}

    async def test_malformed_id(self, client: AsyncClient) -> None:
        response = await client.get("/blog/12345")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID format."


class TestSearchAndFilter:
    """GET /blog/search, /blog/filter/tags and /blog/filter/author."""

    async def test_search_is_case_insensitive(self, client: AsyncClient, author: AuthedUser) -> None:
        await publish(client, author, title="FastAPI tips", content="Dependency injection")
        await publish(client, author, title="Gardening", content="Tomatoes")
        await publish(client, author, title="Misc", content="Notes", tags=["fastapi"])

        response = await client.get("/blog/search", params={"q": "fastapi"})

        assert response.status_code == 200
        titles = sorted(blog["title"] for blog in response.json()["blogs"])
        assert titles == ["FastAPI tips", "Misc"]

    async def test_search_wildcards_are_literal(
        self,
        client: AsyncClient,
        author: AuthedUser,
    ) -> None:
        await publish(client, author, title="Plain", content="Nothing special")

        response = await client.get("/blog/search", params={"q": "%"})

        assert response.json()["blogs"] == []

    async def test_search_ignores_tag_list_punctuation(
        self,
        client: AsyncClient,
        author: AuthedUser,
    ) -> None:
        await publish(client, author, title="Tagged", content="Plain text", tags=["python", "web"])
        await publish(client, author, title="Quoted", content='She said "hi"')

        for query in ('"', "[", '", "'):
            response = await client.get("/blog/search", params={"q": query})
            titles = [blog["title"] for blog in response.json()["blogs"]]
            assert titles == (["Quoted"] if query == '"' else []), query

        response = await client.get("/blog/search", params={"q": "pyth"})
        assert [blog["title"] for blog in response.json()["blogs"]] == ["Tagged"]

    async def test_search_requires_query(self, client: AsyncClient) -> None:
        response = await client.get("/blog/search", params={"q": "  "})

        assert response.status_code == 400
        assert response.json()["message"] == "Search query is required"

    async def test_filter_by_any_tag(self, client: AsyncClient, author: AuthedUser) -> None:
        await publish(client, author, title="Py", tags=["python"])
        await publish(client, author, title="Rs", tags=["rust"])
        await publish(client, author, title="Go", tags=["golang"])

        response = await client.get("/blog/filter/tags", params={"tags": "Python, rust"})

        titles = sorted(blog["title"] for blog in response.json()["blogs"])
        assert titles == ["Py", "Rs"]

    async def test_filter_requires_tags(self, client: AsyncClient) -> None:
        response = await client.get("/blog/filter/tags")

        assert response.status_code == 400
        assert response.json()["message"] == "At least one tag is required"

    async def test_filter_by_author(
        self,
        client: AsyncClient,
        author: AuthedUser,
        reader: AuthedUser,
    ) -> None:
        await publish(client, author, title="Mine")
        await publish(client, reader, title="Theirs")

        response = await client.get("/blog/filter/author", params={"author": author.id})

        assert [blog["title"] for blog in response.json()["blogs"]] == ["Mine"]

    async def test_filter_by_malformed_author(self, client: AsyncClient) -> None:
        response = await client.get("/blog/filter/author", params={"author": "johndoe"})

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid ID format."

    async def test_filter_requires_author(self, client: AsyncClient) -> None:
        response = await client.get("/blog/filter/author")

        assert response.status_code == 400
        assert response.json()["message"] == "Author ID is required"
