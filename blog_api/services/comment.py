"""Comment service: comments, replies and comment likes."""

from collections import defaultdict
from collections.abc import Iterable
from logging import getLogger
from typing import Any
from uuid import UUID

from blog_api.configs import file_logger
from blog_api.errors import NotFoundError, OwnershipError
from blog_api.models import CommentDB, UserDB
from blog_api.repositories import BlogRepository, CommentRepository, UserRepository
from blog_api.schemas.auth import Identity
from blog_api.schemas.comment import CommentNode
from blog_api.schemas.user import AuthorResponse

logger = file_logger(getLogger(__name__))


def build_comment_tree(
    comments: Iterable[CommentDB],
    likers: dict[UUID, list[UUID]],
    users: dict[UUID, UserDB],
) -> list[CommentNode]:
    """
    Assemble a flat list of comments into reply trees.

    Nodes are indexed by ID and attached to their parent in one pass, so the
    depth of a thread never matters. Input order (oldest first) is kept among
    siblings. A comment whose parent is not in ``comments`` becomes a root.

    Args:
        comments: Comments of one blog, oldest first
        likers: Liking user IDs per comment
        users: Commenters, keyed by ID

    Returns:
        list[CommentNode]: Top-level comments with nested replies
    """
    nodes: dict[UUID, dict[str, Any]] = {}
    for comment in comments:
        commenter = users.get(comment.commenter_id)
        nodes[comment.id] = {
            **comment.model_dump(),
            "commenter": AuthorResponse.model_validate(commenter) if commenter else None,
            "liked_by": likers.get(comment.id, []),
            "replies": [],
        }

    roots: list[dict[str, Any]] = []
    for node in nodes.values():
        parent = nodes.get(node["parent_id"]) if node["parent_id"] else None
        if parent is not None:
            parent["replies"].append(node)
        else:
            roots.append(node)
    return [CommentNode.model_validate(node) for node in roots]


def collect_subtree(comments: list[CommentDB], root_id: UUID) -> list[CommentDB]:
    """Return the comment ``root_id`` and all of its replies, keeping input order."""
    children: dict[UUID | None, list[UUID]] = defaultdict(list)
    for comment in comments:
        children[comment.parent_id].append(comment.id)

    wanted = {root_id}
    pending = [root_id]
    while pending:
        for child_id in children[pending.pop()]:
            wanted.add(child_id)
            pending.append(child_id)
    return [comment for comment in comments if comment.id in wanted]


class CommentService:
    """Comment operations; every comment is addressed through its blog."""

    def __init__(
        self,
        comment_repo: CommentRepository,
        blog_repo: BlogRepository,
        user_repo: UserRepository,
    ) -> None:
        self.comment_repo = comment_repo
        self.blog_repo = blog_repo
        self.user_repo = user_repo

    async def blog_tree(self, blog_id: UUID) -> list[CommentNode]:
        """Every comment of a blog as reply trees, populated with commenters."""
        comments = await self.comment_repo.list_for_blog(blog_id)
        return await self._tree(comments)

    async def _tree(self, comments: list[CommentDB]) -> list[CommentNode]:
        likers = await self.comment_repo.liked_by([comment.id for comment in comments])
        users = await self.user_repo.get_many({comment.commenter_id for comment in comments})
        return build_comment_tree(comments, likers, users)

    async def _node(self, comment: CommentDB) -> CommentNode:
        """Render one comment with its replies."""
        thread = await self.comment_repo.list_for_blog(comment.blog_id)
        (node,) = await self._tree(collect_subtree(thread, comment.id))
        return node

    async def _get_comment(self, blog_id: UUID, comment_id: UUID, detail: str) -> CommentDB:
        await self.blog_repo.get_or_raise(blog_id)
        comment = await self.comment_repo.get_in_blog(blog_id, comment_id)
        if comment is None:
            raise NotFoundError(detail)
        return comment

    async def _get_owned(self, blog_id: UUID, comment_id: UUID, identity: Identity) -> CommentDB:
        comment = await self._get_comment(blog_id, comment_id, "Comment not found")
        if comment.commenter_id != identity.id:
            raise OwnershipError("comment")
        return comment

    async def add(self, blog_id: UUID, identity: Identity, content: str) -> CommentNode:
        """
        Add a top-level comment to a blog.

        Raises:
            RecordNotFoundError: If the blog does not exist
        """
        await self.blog_repo.get_or_raise(blog_id)
        comment = await self.comment_repo.add(blog_id, identity.id, content)
        logger.info(f"Comment {comment.id} added to blog {blog_id}")
        return await self._node(comment)

    async def reply(
        self,
        blog_id: UUID,
        parent_id: UUID,
        identity: Identity,
        content: str,
    ) -> CommentNode:
        """
        Reply to a comment at any depth of the blog's reply tree.

        Raises:
            NotFoundError: If the parent comment is not part of the blog
        """
        parent = await self._get_comment(blog_id, parent_id, "Parent comment not found")
        reply = await self.comment_repo.add(blog_id, identity.id, content, parent_id=parent.id)
        return await self._node(reply)

    async def update(
        self,
        blog_id: UUID,
        comment_id: UUID,
        identity: Identity,
        content: str,
    ) -> CommentNode:
        """
        Edit a comment's text; only its commenter may do so.

        Raises:
            OwnershipError: If the requester did not write the comment
        """
        comment = await self._get_owned(blog_id, comment_id, identity)
        comment = await self.comment_repo.edit(comment, content)
        return await self._node(comment)

    async def delete(self, blog_id: UUID, comment_id: UUID, identity: Identity) -> None:
        """Delete a comment with all of its replies; only its commenter may do so."""
        comment = await self._get_owned(blog_id, comment_id, identity)
        await self.comment_repo.delete(comment)
        logger.info(f"Comment {comment_id} deleted from blog {blog_id}")

    async def like(self, blog_id: UUID, comment_id: UUID, identity: Identity) -> CommentNode:
        comment = await self._get_comment(blog_id, comment_id, "Comment not found")
        await self.comment_repo.like(comment.id, identity.id)
        await self.comment_repo.session.refresh(comment)
        return await self._node(comment)

    async def unlike(self, blog_id: UUID, comment_id: UUID, identity: Identity) -> CommentNode:
        comment = await self._get_comment(blog_id, comment_id, "Comment not found")
        await self.comment_repo.unlike(comment.id, identity.id)
        await self.comment_repo.session.refresh(comment)
        return await self._node(comment)
