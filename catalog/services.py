# catalog/services.py
from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP

from django.db.models import Avg, Count, Q, QuerySet

from .models import Category, Product, Review

RELATED_LIMIT = 10


def active_products() -> QuerySet:
    """Active products annotated with average_rating and review_count."""
    active_review = Q(reviews__status=True)
    return (
        Product.objects.filter(status=True)
        .select_related("category")
        .annotate(
            average_rating=Avg("reviews__rating", filter=active_review),
            review_count=Count("reviews", filter=active_review, distinct=True),
        )
    )


def latest_products() -> QuerySet:
    return active_products().order_by("-created_at", "-id")


def popular_products() -> QuerySet:
    """Most ordered first."""
    return (
        active_products()
        .annotate(times_ordered=Count("order_details", distinct=True))
        .order_by("-times_ordered", "-created_at", "-id")
    )


def most_reviewed_products() -> QuerySet:
    """Products with at least one active review, most reviewed first."""
    return active_products().filter(review_count__gt=0).order_by("-review_count", "-id")


def search_products(name: str) -> QuerySet:
    """Any keyword of name matching the product name or its tags."""
    keywords = [k for k in (name or "").split() if k]
    if not keywords:
        return active_products().none()
    query = Q()
    for keyword in keywords:
        query |= Q(name__icontains=keyword) | Q(tags__icontains=keyword)
    return active_products().filter(query).order_by("name", "id")


def related_products(product: Product) -> QuerySet:
    """Other active products from the same category."""
    if product.category_id is None:
        return active_products().none()
    return (
        active_products()
        .filter(category_id=product.category_id)
        .exclude(pk=product.pk)
        .order_by("-created_at", "-id")[:RELATED_LIMIT]
    )


def recommended_products(user=None) -> QuerySet:
    """
    Products from the categories the customer has bought from. Anonymous
    customers, and customers with no such purchases, get the latest products.
    """
    if user is not None and user.is_authenticated:
        category_ids = (
            Product.objects.filter(order_details__order__user=user, category__isnull=False)
            .values_list("category_id", flat=True)
            .distinct()
        )
        category_ids = list(category_ids)
        if category_ids:
            return active_products().filter(category_id__in=category_ids).order_by("-created_at", "-id")
    return latest_products()


# ---------------------------- categories ---------------------------- #

def parent_categories() -> QuerySet:
    return Category.objects.filter(status=True, parent__isnull=True)


def child_categories(parent_id) -> QuerySet:
    return Category.objects.filter(status=True, parent_id=parent_id)


def category_products(category: Category, include_descendants: bool = False) -> QuerySet:
    """
    Active products of a category. include_descendants also takes products
    of its children and grandchildren.
    """
    ids = [category.pk]
    if include_descendants:
        children = list(Category.objects.filter(parent=category).values_list("pk", flat=True))
        grandchildren = list(Category.objects.filter(parent_id__in=children).values_list("pk", flat=True))
        ids += children + grandchildren
    return active_products().filter(category_id__in=ids).order_by("-created_at", "-id")


# ------------------------------ reviews ------------------------------ #

def review_stats(product: Product) -> dict:
    """Count, average (one decimal) and per-star breakdown of active reviews."""
    counts = {star: 0 for star in range(1, 6)}
    rows = (
        Review.objects.filter(product=product, status=True)
        .values("rating")
        .annotate(n=Count("id"))
    )
    for row in rows:
        counts[row["rating"]] = row["n"]

    total = sum(counts.values())
    if total == 0:
        average = Decimal("0")
    else:
        stars = sum(star * n for star, n in counts.items())
        average = (Decimal(stars) / total).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return {"total": total, "average": average, "rating_count": counts}


def submit_review(user, product: Product, rating: int, comment: str = "", order=None) -> Review:
    if not 1 <= int(rating) <= 5:
        raise ValueError("RATING_OUT_OF_RANGE")
    return Review.objects.create(
        product=product, user=user, rating=int(rating), comment=comment or "", order=order,
    )
