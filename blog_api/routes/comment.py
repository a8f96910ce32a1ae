# blog_api/routes/comment.py

"""
Comment Routes.

Comments and replies nested under a blog. Every endpoint requires a session;
edits and deletions are reserved to the comment's author.
"""

from uuid import UUID

from fastapi import APIRouter, Request
from fastapi.responses import ORJSONResponse
from starlette.status import HTTP_201_CREATED

from blog_api.dependencies import CommentServiceDep, IdentityDep
from blog_api.managers import limiter
from blog_api.schemas.comment import CommentCreate
from blog_api.utils import success_response

router = APIRouter(prefix="/blog/{blog_id}/comment", tags=["💬 Comments"])

COMMENT_EXAMPLE = {
    "id": "0b7e1c52-3f7a-4d55-9a52-7f0d0e6d2a11",
    "blogId": "6f1c2b9e-8a4d-4f0e-9c1a-2b3c4d5e6f70",
    "parentId": None,
    "commenterId": "123e4567-e89b-12d3-a456-426614174000",
    "commenter": {
        "id": "123e4567-e89b-12d3-a456-426614174000",
        "username": "johndoe",
        "profilePic": None,
    },
    "content": "Great post!",
    "likes": 0,
    "likedBy": [],
    "replies": [],
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
                "message": "Access denied. You are not the author of this comment.",
            },
        },
    },
}

NOT_FOUND_RESPONSE = {
    "description": "Not Found",
    "content": {
        "application/json": {"example": {"status": "fail", "message": "Comment not found"}},
    },
}


def comment_example(message: str) -> dict:
    return {"content": {"application/json": {"example": {"message": message, "comment": COMMENT_EXAMPLE}}}}


@router.post(
    "/add",
    response_class=ORJSONResponse,
    status_code=HTTP_201_CREATED,
    summary="Add a comment",
    responses={
        201: comment_example("Comment added successfully"),
        401: UNAUTHORIZED_RESPONSE,
        404: {
            "description": "Not Found",
            "content": {
                "application/json": {"example": {"status": "fail", "message": "Blog not found"}},
            },
        },
    },
    operation_id="comment_add",
)
@limiter.limit("30/minute")
async def add_comment(
    request: Request,
    blog_id: UUID,
    body: CommentCreate,
    identity: IdentityDep,
    comment_service: CommentServiceDep,
) -> ORJSONResponse:
    """
    Add a top-level comment to a blog.

    Parameters
    ----------
    request : Request
        Current request context.
    blog_id : UUID
        Commented blog.
    body : CommentCreate
        Comment text.
    identity : Identity
        Commenter, resolved by the guard.
    comment_service : CommentService
        Comment service dependency.

    Returns
    -------
    ORJSONResponse
        201 with the new comment.
    """
    comment = await comment_service.add(blog_id, identity, body.comment)
    return success_response("Comment added successfully", HTTP_201_CREATED, comment=comment)


@router.put(
    "/update/{comment_id}",
    response_class=ORJSONResponse,
    summary="Edit a comment",
    responses={
        200: comment_example("Comment updated successfully"),
        401: UNAUTHORIZED_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="comment_update",
)
async def update_comment(
    request: Request,
    blog_id: UUID,
    comment_id: UUID,
    body: CommentCreate,
    identity: IdentityDep,
    comment_service: CommentServiceDep,
) -> ORJSONResponse:
    """
    Edit a comment written by the current user.

    Parameters
    ----------
    request : Request
        Current request context.
    blog_id : UUID
        Blog the comment belongs to.
    comment_id : UUID
        Comment to edit.
    body : CommentCreate
        New text.
    identity : Identity
        Requester, resolved by the guard.
    comment_service : CommentService
        Comment service dependency.

    Returns
    -------
    ORJSONResponse
        The edited comment with its replies.
    """
    comment = await comment_service.update(blog_id, comment_id, identity, body.comment)
    return success_response("Comment updated successfully", comment=comment)


@router.put(
    "/like/{comment_id}",
    response_class=ORJSONResponse,
    summary="Like a comment",
    responses={
        200: comment_example("Comment liked successfully"),
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="comment_like",
)
async def like_comment(
    request: Request,
    blog_id: UUID,
    comment_id: UUID,
    identity: IdentityDep,
    comment_service: CommentServiceDep,
) -> ORJSONResponse:
    comment = await comment_service.like(blog_id, comment_id, identity)
    return success_response("Comment liked successfully", comment=comment)


@router.put(
    "/unlike/{comment_id}",
    response_class=ORJSONResponse,
    summary="Unlike a comment",
    responses={
        200: comment_example("Comment unliked successfully"),
        401: UNAUTHORIZED_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="comment_unlike",
)
async def unlike_comment(
    request: Request,
    blog_id: UUID,
    comment_id: UUID,
    identity: IdentityDep,
    comment_service: CommentServiceDep,
) -> ORJSONResponse:
    comment = await comment_service.unlike(blog_id, comment_id, identity)
    return success_response("Comment unliked successfully", comment=comment)


@router.post(
    "/reply/{comment_id}",
    response_class=ORJSONResponse,
    status_code=HTTP_201_CREATED,
    summary="Reply to a comment",
    description="Replies can be nested to any depth.",
    responses={
        201: comment_example("Reply added successfully"),
        401: UNAUTHORIZED_RESPONSE,
        404: {
            "description": "Not Found",
            "content": {
                "application/json": {
                    "example": {"status": "fail", "message": "Parent comment not found"},
                },
            },
        },
    },
    operation_id="comment_reply",
)
@limiter.limit("30/minute")
async def reply_to_comment(
    request: Request,
    blog_id: UUID,
    comment_id: UUID,
    body: CommentCreate,
    identity: IdentityDep,
    comment_service: CommentServiceDep,
) -> ORJSONResponse:
    """
    Reply to a comment.

    Parameters
    ----------
    request : Request
        Current request context.
    blog_id : UUID
        Blog the thread belongs to.
    comment_id : UUID
        Parent comment.
    body : CommentCreate
        Reply text.
    identity : Identity
        Replier, resolved by the guard.
    comment_service : CommentService
        Comment service dependency.

    Returns
    -------
    ORJSONResponse
        201 with the new reply.
    """
    reply = await comment_service.reply(blog_id, comment_id, identity, body.comment)
    return success_response("Reply added successfully", HTTP_201_CREATED, comment=reply)


@router.delete(
    "/delete/{comment_id}",
    response_class=ORJSONResponse,
    summary="Delete a comment",
    description="Delete a comment together with all of its replies.",
    responses={
        200: {"content": {"application/json": {"example": {"message": "Comment deleted successfully"}}}},
        401: UNAUTHORIZED_RESPONSE,
        403: FORBIDDEN_RESPONSE,
        404: NOT_FOUND_RESPONSE,
    },
    operation_id="comment_delete",
)
async def delete_comment(
    request: Request,
    blog_id: UUID,
    comment_id: UUID,
    identity: IdentityDep,
    comment_service: CommentServiceDep,
) -> ORJSONResponse:
    await comment_service.delete(blog_id, comment_id, identity)
    return success_response("Comment deleted successfully")
