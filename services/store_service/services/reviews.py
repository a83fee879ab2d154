"""Product reviews and the rating aggregates stored on each product.

``Product.rating`` (average, one decimal) and ``Product.num_reviews`` are
recomputed in the same transaction as every review insert or delete, with a
single UPDATE over the product's reviews so concurrent reviews cannot leave
stale totals behind.
"""

import uuid

from libs.auth.models import AuthUser
from libs.common.logging import get_logger
from services.store_service.errors import ForbiddenError, NotFoundError
from services.store_service.models import Product, Review
from services.store_service.schemas import ReviewCreate
from services.store_service.services import catalog
from services.store_service.services.pagination import paginate
from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)

DEFAULT_REVIEW_LIMIT = 5
ANONYMOUS_REVIEWER = "Anonymous"


def _parse_review_id(review_id) -> uuid.UUID:
    if isinstance(review_id, uuid.UUID):
        return review_id
    try:
        return uuid.UUID(str(review_id))
    except ValueError:
        raise NotFoundError("Review not found")


async def refresh_product_rating(db: AsyncSession, product_id: uuid.UUID) -> None:
    """Rewrite the product's rating/num_reviews from its reviews. Does not commit."""
    reviews_of_product = Review.product_id == product_id
    await db.execute(
        update(Product)
        .where(Product.id == product_id)
        .values(
            rating=func.round(
                select(func.coalesce(func.avg(Review.rating), 0))
                .where(reviews_of_product)
                .scalar_subquery(),
                1,
            ),
            num_reviews=select(func.count(Review.id))
            .where(reviews_of_product)
            .scalar_subquery(),
        )
        .execution_options(synchronize_session=False)
    )


async def list_reviews(
    db: AsyncSession, product_id, *, page: int, limit: int
) -> tuple[list[Review], int]:
    product = await catalog.get_product(db, product_id, active_only=False)
    query = (
        select(Review)
        .where(Review.product_id == product.id)
        .order_by(Review.created_at.desc())
    )
    return await paginate(db, query, page, limit)


async def get_review_stats(db: AsyncSession, product_id) -> dict:
    """Stored aggregates plus how many reviews gave each star rating."""
    product = await catalog.get_product(db, product_id, active_only=False)
    await db.refresh(product)

    counts = await db.execute(
        select(Review.rating, func.count(Review.id))
        .where(Review.product_id == product.id)
        .group_by(Review.rating)
    )
    distribution = {stars: 0 for stars in range(1, 6)}
    distribution.update({rating: count for rating, count in counts.all()})

    return {
        "total_reviews": product.num_reviews or 0,
        "average_rating": product.rating or 0,
        "rating_distribution": distribution,
    }


async def create_review(
    db: AsyncSession, product_id, user: AuthUser, review_in: ReviewCreate
) -> Review:
    product = await catalog.get_product(db, product_id)

    user_name = (review_in.user_name or "").strip() or user.name or ANONYMOUS_REVIEWER
    review = Review(
        product_id=product.id,
        user_id=user.user_id,
        user_name=user_name,
        rating=review_in.rating,
        comment=review_in.comment,
    )
    db.add(review)
    await db.flush()
    await refresh_product_rating(db, product.id)
    await db.commit()
    await db.refresh(review)

    logger.info(
        "Review %s (%d stars) added to product %s by %s",
        review.id,
        review.rating,
        product.id,
        user.user_id,
    )
    return review


async def mark_helpful(db: AsyncSession, review_id) -> int:
    result = await db.execute(
        update(Review)
        .where(Review.id == _parse_review_id(review_id))
        .values(helpful=Review.helpful + 1)
        .returning(Review.helpful)
        .execution_options(synchronize_session=False)
    )
    helpful = result.scalar_one_or_none()
    if helpful is None:
        raise NotFoundError("Review not found")
    await db.commit()
    return helpful


async def delete_review(db: AsyncSession, review_id, user: AuthUser) -> None:
    """The author or an admin may delete a review."""
    review = await db.get(Review, _parse_review_id(review_id))
    if not review:
        raise NotFoundError("Review not found")
    if review.user_id != user.user_id and not user.is_admin:
        raise ForbiddenError("Not authorized to delete this review")

    product_id = review.product_id
    await db.delete(review)
    await db.flush()
    await refresh_product_rating(db, product_id)
    await db.commit()
    logger.info("Review %s removed from product %s", review_id, product_id)


async def refresh_all_product_ratings(db: AsyncSession) -> int:
    """Recompute every product's aggregates (e.g. after a bulk import)."""
    product_ids = (await db.execute(select(Product.id))).scalars().all()
    for product_id in product_ids:
        await refresh_product_rating(db, product_id)
    await db.commit()
    logger.info("Recomputed rating aggregates for %d products", len(product_ids))
    return len(product_ids)
