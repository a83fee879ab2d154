"""Store reviews router: public review reads, signed-in review writes."""

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_current_user, require_admin
from libs.auth.models import AuthUser
from libs.db.session import get_async_db
from services.store_service.schemas import (
    RatingRefreshResponse,
    ReviewCreate,
    ReviewHelpfulResponse,
    ReviewListResponse,
    ReviewResponse,
    ReviewStatsResponse,
)
from services.store_service.services import reviews
from services.store_service.services.pagination import MAX_LIMIT, page_count
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(tags=["store"])


# ============================================================================
# PRODUCT REVIEWS
# ============================================================================


@router.get("/products/{product_id}/reviews", response_model=ReviewListResponse)
async def list_product_reviews(
    product_id: str,
    page: int = Query(1, ge=1),
    limit: int = Query(reviews.DEFAULT_REVIEW_LIMIT, ge=1, le=MAX_LIMIT),
    db: AsyncSession = Depends(get_async_db),
):
    """List a product's reviews, newest first."""
    rows, total = await reviews.list_reviews(db, product_id, page=page, limit=limit)
    return ReviewListResponse(
        reviews=[ReviewResponse.model_validate(r) for r in rows],
        page=page,
        pages=page_count(total, limit),
        total=total,
    )


@router.get("/products/{product_id}/reviews/stats", response_model=ReviewStatsResponse)
async def get_product_review_stats(
    product_id: str,
    db: AsyncSession = Depends(get_async_db),
):
    return await reviews.get_review_stats(db, product_id)


@router.post(
    "/products/{product_id}/reviews",
    response_model=ReviewResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_product_review(
    product_id: str,
    review_in: ReviewCreate,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Review a product. Updates the product's rating and review count."""
    return await reviews.create_review(db, product_id, current_user, review_in)


@router.put("/reviews/{review_id}/helpful", response_model=ReviewHelpfulResponse)
async def mark_review_helpful(
    review_id: str,
    _user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    helpful = await reviews.mark_helpful(db, review_id)
    return ReviewHelpfulResponse(helpful=helpful)


@router.delete("/reviews/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(
    review_id: str,
    current_user: AuthUser = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_db),
):
    """Delete a review (its author or an admin)."""
    await reviews.delete_review(db, review_id, current_user)


# ============================================================================
# ADMIN - RATINGS
# ============================================================================


@router.post("/reviews/update-all-ratings", response_model=RatingRefreshResponse)
async def refresh_all_ratings(
    _admin: AuthUser = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Recompute rating/review count for every product."""
    updated = await reviews.refresh_all_product_ratings(db)
    return RatingRefreshResponse(updated=updated)
