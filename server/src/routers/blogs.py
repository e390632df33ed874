"""
Blog router.

Provides REST API endpoints for:
- Listing and fetching blogs (public)
- Creating blogs (bearer token required; the caller becomes the owner)
- Updating blogs (public, e.g. incrementing likes)
- Deleting blogs (bearer token required; only the owner may delete)
"""

import structlog
from typing import List
from fastapi import APIRouter, Depends, Response, status

from server.src.dependencies import get_blog_repository, get_current_user
from server.src.errors import AuthError
from server.src.models.auth import CurrentUser, ErrorResponse
from server.src.models.blog import BlogCreate, BlogResponse, BlogUpdate
from server.src.repositories.blog_repo import BlogRepository

logger = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/bloglist",
    tags=["Blogs"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        404: {"model": ErrorResponse, "description": "Not Found"},
    }
)


@router.get("", response_model=List[BlogResponse], summary="List blogs")
async def list_blogs(
    blog_repo: BlogRepository = Depends(get_blog_repository)
) -> List[dict]:
    """Return every blog with its owner populated."""
    return await blog_repo.list_blogs()


@router.get("/{blog_id}", response_model=BlogResponse, summary="Get blog")
async def get_blog(
    blog_id: str,
    blog_repo: BlogRepository = Depends(get_blog_repository)
) -> dict:
    return await blog_repo.get_blog(blog_id)


@router.post(
    "",
    response_model=BlogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create blog",
    responses={401: {"model": ErrorResponse, "description": "Unauthorized"}}
)
async def create_blog(
    blog: BlogCreate,
    current_user: CurrentUser = Depends(get_current_user),
    blog_repo: BlogRepository = Depends(get_blog_repository)
) -> dict:
    """
    Create a blog owned by the authenticated user.

    ``title`` and ``url`` are required; ``likes`` defaults to 0.
    """
    return await blog_repo.create_blog(blog.model_dump(), owner_id=current_user.id)


@router.put("/{blog_id}", response_model=BlogResponse, summary="Update blog")
async def update_blog(
    blog_id: str,
    blog: BlogUpdate,
    blog_repo: BlogRepository = Depends(get_blog_repository)
) -> dict:
    """
    Replace the supplied fields of a blog.

    Not authenticated: any client may update likes.
    """
    return await blog_repo.update_blog(blog_id, blog.model_dump(exclude_unset=True))


@router.delete(
    "/{blog_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete blog",
    responses={401: {"model": ErrorResponse, "description": "Unauthorized"}}
)
async def delete_blog(
    blog_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    blog_repo: BlogRepository = Depends(get_blog_repository)
) -> Response:
    """Delete a blog. Only its creator may do so."""
    owner_id = await blog_repo.get_owner_id(blog_id)

    if owner_id != current_user.id:
        logger.warning(
            "blog_delete_forbidden",
            blog_id=blog_id,
            owner_id=owner_id,
            user_id=current_user.id
        )
        raise AuthError("only the creator can delete a blog")

    await blog_repo.delete_blog(blog_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
