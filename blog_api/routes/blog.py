# blog_api/routes/blog.py

"""
Blog Routes.

Publishing, editing and deleting posts, likes, and the public listing,
search and filter endpoints.

Summary
-------
Endpoints include:
  - Publish blog
  - Update / delete blog (author only)
  - Like / unlike blog
  - Paginated listing
  - Search and filter by tags or author
  - Get blog by id, populated with author and comments

Static paths are declared before ``/{blog_id}`` so they are never captured by it.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from blog_api.dependencies import BlogServiceDep, IdentityDep, PageQueryDep
from blog_api.errors import BadRequestError
from blog_api.managers import limiter
from blog_api.schemas.blog import BlogCreate, BlogUpdate
from blog_api.services.blog import parse_id
from blog_api.utils import split_csv, success_response

router = APIRouter(prefix="/blog", tags=["📝 Blogs"])

BLOG_EXAMPLE = {
    "id": "6f1c2b9e-8a4d-4f0e-9c1a-2b3c4d5e6f70",
    "title": "Getting started with FastAPI",
    "content": "FastAPI is a modern web framework for building APIs with Python.",
    "authorId": "123e4567-e89b-12d3-a456-426614174000",
    "status": "published",
    "tags": ["python", "fastapi"],
    "likes": 1,
    "likedBy": ["123e4567-e89b-12d3-a456-426614174000"],
    "createdAt": "2025-01-01T00:00:00",
    "updatedAt": "2025-01-01T00:00:00",
}

UNAUTHORIZED_RESPONSE = {
    "description": "Unauthorized",
    "content": {
        "application/json": {
            "example": {"status": "fail", "message": "Access denied. No token provided."},
        },
    },
}

FORBIDDEN_RESPONSE = {
    "description": "Forbidden",
    "content": {
        "application/json": {
            "example": {
                "status": "fail",
                "message": "Access denied. You are not the author of this blog.",
            },
        },
    },
}

NOT_FOUND_RESPONSE = {
    "description": "Not Found",
    "content": {
        "application/json": {"example": {"status": "fail", "message": "Blog not found"}},
    },
}


@router.post(
    "/publish",
    response_class=ORJSONResponse,
    status_code=HTTP_201_CREATED,
    summary="Publish a blog",
    description="Create a blog authored by the current user. Status defaults to draft.",
    responses={
        201: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog uploaded to db", "blog": BLOG_EXAMPLE},
                },
            },
        },
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "title: Field required"},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
    },
    operation_id="blog_publish",
)
@limiter.limit("20/minute")
async def publish_blog(
    request: Request,
    blog: BlogCreate,
    identity: IdentityDep,
    blog_service: BlogServiceDep,
) -> ORJSONResponse:
    """
    Publish a new blog.

    Parameters
    ----------
    request : Request
        Current request context.
    blog : BlogCreate
        Title, content, tags and status.
    identity : Identity
        Author, resolved by the guard.
    blog_service : BlogService
        Blog service dependency.

    Returns
    -------
    ORJSONResponse
        201 with the created blog.
    """
    created = await blog_service.publish(identity, blog)
    return success_response("Blog uploaded to db", HTTP_201_CREATED, blog=created)


@router.put(
    "/update/{blog_id}",
    response_class=ORJSONResponse,
    summary="Update a blog",
    description="Edit title, content, tags or status. Likes and authorship cannot be changed.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog updated successfully", "blog": BLOG_EXAMPLE},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="blog_update",
)
async def update_blog(
    request: Request,
    blog_id: UUID,
    blog_update: BlogUpdate,
    identity: IdentityDep,
    blog_service: BlogServiceDep,
) -> ORJSONResponse:
    """
    Update a blog owned by the current user.

    Parameters
    ----------
    request : Request
        Current request context.
    blog_id : UUID
        Blog to edit.
    blog_update : BlogUpdate
        Fields to change.
    identity : Identity
        Requester, resolved by the guard.
    blog_service : BlogService
        Blog service dependency.

    Returns
    -------
    ORJSONResponse
        The updated blog.

    Raises
    ------
    OwnershipError
        If the requester is not the author.
    """
    updated = await blog_service.update(blog_id, identity, blog_update)
    return success_response("Blog updated successfully", blog=updated)


@router.delete(
    "/delete",
    response_class=ORJSONResponse,
    summary="Delete a blog",
    description="Delete a blog with its comments and likes. Author only.",
    responses={
        200: {"content": {"application/json": {"example": {"message": "Blog deleted successfully!"}}}},
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Blog ID is required"},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="blog_delete",
)
async def delete_blog(
    request: Request,
    identity: IdentityDep,
    blog_service: BlogServiceDep,
    blog_id: Annotated[str | None, Query(alias="id", description="Blog ID")] = None,
) -> ORJSONResponse:
    """
    Delete a blog owned by the current user.

    Parameters
    ----------
    request : Request
        Current request context.
    identity : Identity
        Requester, resolved by the guard.
    blog_service : BlogService
        Blog service dependency.
    blog_id : str | None
        ``id`` query parameter.

    Returns
    -------
    ORJSONResponse
        Confirmation message.
    """
    if not blog_id:
        mssg = "Blog ID is required"
        raise BadRequestError(mssg)
    await blog_service.delete(parse_id(blog_id), identity)
    return success_response("Blog deleted successfully!")


@router.put(
    "/like/{blog_id}",
    response_class=ORJSONResponse,
    summary="Like a blog",
    description="Like a blog once; repeating the call changes nothing.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog liked successfully", "blog": BLOG_EXAMPLE},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="blog_like",
)
async def like_blog(
    request: Request,
    blog_id: UUID,
    identity: IdentityDep,
    blog_service: BlogServiceDep,
) -> ORJSONResponse:
    blog = await blog_service.like(blog_id, identity)
    return success_response("Blog liked successfully", blog=blog)


@router.put(
    "/unlike/{blog_id}",
    response_class=ORJSONResponse,
    summary="Unlike a blog",
    description="Withdraw a like; unliking a blog that was not liked changes nothing.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blog unliked successfully", "blog": BLOG_EXAMPLE},
                },
            },
        },
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="blog_unlike",
)
async def unlike_blog(
    request: Request,
    blog_id: UUID,
    identity: IdentityDep,
    blog_service: BlogServiceDep,
) -> ORJSONResponse:
    blog = await blog_service.unlike(blog_id, identity)
    return success_response("Blog unliked successfully", blog=blog)


@router.get(
    "/allblogs",
    response_class=ORJSONResponse,
    summary="List blogs",
    description="Paginated listing, newest first. Defaults: page=1, limit=10.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "Blogs fetched successfully",
                        "blogs": [BLOG_EXAMPLE],
                        "page": 1,
                        "limit": 10,
                        "totalBlogs": 1,
                        "totalPages": 1,
                    },
                },
            },
        },
    },
    operation_id="blog_list",
)
async def list_blogs(
    request: Request,
    paging: PageQueryDep,
    blog_service: BlogServiceDep,
) -> ORJSONResponse:
    """
    List blogs page by page.

    Parameters
    ----------
    request : Request
        Current request context.
    paging : PageQuery
        Page number and size, parsed leniently.
    blog_service : BlogService
        Blog service dependency.

    Returns
    -------
    ORJSONResponse
        The page with ``totalBlogs`` and ``totalPages``.
    """
    page = await blog_service.list_page(paging.page, paging.limit)
    return success_response(
        "Blogs fetched successfully",
        **page.model_dump(mode="json", by_alias=True),
    )


@router.get(
    "/search",
    response_class=ORJSONResponse,
    summary="Search blogs",
    description="Case-insensitive substring search over title, content and tags.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blogs found", "blogs": [BLOG_EXAMPLE]},
                },
            },
        },
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Search query is required"},
                },
            },
        },
    },
    operation_id="blog_search",
)
@limiter.limit("30/minute")
async def search_blogs(
    request: Request,
    blog_service: BlogServiceDep,
    q: Annotated[str | None, Query(description="Search text")] = None,
) -> ORJSONResponse:
    blogs = await blog_service.search(q)
    return success_response("Blogs found", blogs=blogs)


@router.get(
    "/filter/tags",
    response_class=ORJSONResponse,
    summary="Filter blogs by tags",
    description="Blogs carrying any of the comma separated tags.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blogs found", "blogs": [BLOG_EXAMPLE]},
                },
            },
        },
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "At least one tag is required"},
                },
            },
        },
    },
    operation_id="blog_filter_tags",
)
async def filter_by_tags(
    request: Request,
    blog_service: BlogServiceDep,
    tags: Annotated[str | None, Query(description="Comma separated tags")] = None,
) -> ORJSONResponse:
    blogs = await blog_service.filter_by_tags(split_csv(tags))
    return success_response("Blogs found", blogs=blogs)


@router.get(
    "/filter/author",
    response_class=ORJSONResponse,
    summary="Filter blogs by author",
    description="Blogs written by one user.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {"message": "Blogs found", "blogs": [BLOG_EXAMPLE]},
                },
            },
        },
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Invalid ID format."},
                },
            },
        },
    },
    operation_id="blog_filter_author",
)
async def filter_by_author(
    request: Request,
    blog_service: BlogServiceDep,
    author: Annotated[str | None, Query(description="Author ID")] = None,
) -> ORJSONResponse:
    blogs = await blog_service.filter_by_author(author)
    return success_response("Blogs found", blogs=blogs)


@router.get(
    "/{blog_id}",
    response_class=ORJSONResponse,
    summary="Get a blog",
    description="One blog populated with its author and comment tree.",
    responses={
        200: {
            "content": {
                "application/json": {
                    "example": {
                        "message": "Blog fetched successfully",
                        "blog": {
                            **BLOG_EXAMPLE,
                            "author": {
                                "id": "123e4567-e89b-12d3-a456-426614174000",
                                "username": "johndoe",
                                "profilePic": None,
                            },
                            "comments": [],
                        },
                    },
                },
            },
        },
        400: {
            "description": "Bad Request",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Invalid ID format."},
                },
            },
        },
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="blog_get",
)
async def get_blog(
    request: Request,
    blog_id: UUID,
    blog_service: BlogServiceDep,
) -> ORJSONResponse:
    """
    Fetch one blog.

    Parameters
    ----------
    request : Request
        Current request context.
    blog_id : UUID
        Blog to fetch.
    blog_service : BlogService
        Blog service dependency.

    Returns
    -------
    ORJSONResponse
        The blog with ``author`` and ``comments``.
    """
    blog = await blog_service.get_detail(blog_id)
    return success_response("Blog fetched successfully", blog=blog)
