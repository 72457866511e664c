import logging

from django.db import transaction
from django.db.models import F
from rest_framework.exceptions import NotFound
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from core.assets import AssetKind, delete_asset_on_commit, store_image, store_optional_image
from core.permissions import IsStaffOrReadOnly, user_is_staff_member
from core.query import (
    apply_date_range,
    apply_exact_filters,
    choice_of,
    paginate,
    parse_flag,
    parse_id,
    search_filter,
)
from core.responses import api_created, api_error, api_success
from .models import Post
from .serializers import PostSerializer

logger = logging.getLogger("hub.posts")

POST_FILTERS = {
    "category": "category",
    "featured": ("featured", parse_flag),
    "author": ("author_id", parse_id),
}

POST_STATUS_FILTER = {"status": ("status", choice_of(Post.STATUS_CHOICES))}

POST_SEARCH_FIELDS = ("title", "description", "tags")


def get_post_or_404(pk, user) -> Post:
    """
    Drafts are reported as missing to anyone who is not staff.
    """
    try:
        post = Post.objects.select_related("author").get(pk=pk)
    except Post.DoesNotExist:
        raise NotFound("Post not found")

    if not post.is_published and not user_is_staff_member(user):
        raise NotFound("Post not found")
    return post


class PostListCreateView(APIView):
    permission_classes = [IsStaffOrReadOnly]

    def get(self, request):
        params = request.query_params
        qs = Post.objects.select_related("author")

        if user_is_staff_member(request.user):
            qs = apply_exact_filters(qs, params, POST_STATUS_FILTER)
        else:
            qs = qs.filter(status=Post.STATUS_PUBLISHED)

        qs = apply_exact_filters(qs, params, POST_FILTERS)
        qs = qs.filter(search_filter(params.get("search"), POST_SEARCH_FIELDS))
        qs = apply_date_range(qs, params, "created_at")
        qs = qs.order_by(F("published_at").desc(nulls_last=True), "-created_at")

        page = paginate(qs, params, default_limit=10)
        serializer = PostSerializer(page.items, many=True, context={"request": request})

        return api_success(
            "Posts retrieved successfully",
            serializer.data,
            pagination=page.pagination(),
        )

    def post(self, request):
        upload = request.FILES.get("image")
        if upload is None:
            return api_error("Image is required")

        with store_image(upload, AssetKind.POSTS) as pending:
            serializer = PostSerializer(data=request.data, context={"request": request})
            serializer.is_valid(raise_exception=True)
            with transaction.atomic():
                post = serializer.save(author=request.user, image=pending.name)
            pending.commit()

        logger.info(f"Post {post.pk} created by user {request.user.pk}: {post.title!r}")
        return api_created(
            "Post created successfully",
            PostSerializer(post, context={"request": request}).data,
        )


class PostDetailView(APIView):
    permission_classes = [IsStaffOrReadOnly]

    def get(self, request, pk):
        post = get_post_or_404(pk, request.user)

        # Only published posts are counted.
        if post.is_published:
            Post.objects.filter(pk=post.pk).update(views=F("views") + 1)
            post.refresh_from_db(fields=["views"])

        serializer = PostSerializer(post, context={"request": request})
        return api_success("Post retrieved successfully", serializer.data)

    def put(self, request, pk):
        post = get_post_or_404(pk, request.user)
        old_image = post.image

        with store_optional_image(request.FILES.get("image"), AssetKind.POSTS) as pending:
            serializer = PostSerializer(
                post, data=request.data, partial=True, context={"request": request}
            )
            serializer.is_valid(raise_exception=True)

            changes = {"image": pending.name} if pending.name else {}
            with transaction.atomic():
                post = serializer.save(**changes)
            pending.commit()

        if pending.name and old_image != pending.name:
            delete_asset_on_commit(old_image)

        logger.info(f"Post {post.pk} updated by user {request.user.pk}")
        return api_success(
            "Post updated successfully",
            PostSerializer(post, context={"request": request}).data,
        )

    patch = put

    def delete(self, request, pk):
        post = get_post_or_404(pk, request.user)
        post_id = post.pk
        post.delete()
        logger.info(f"Post {post_id} deleted by user {request.user.pk}")
        return api_success("Post deleted successfully")


class PostLikeView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, pk):
        updated = (
            Post.objects
            .filter(pk=pk, status=Post.STATUS_PUBLISHED)
            .update(likes=F("likes") + 1)
        )
        if not updated:
            raise NotFound("Post not found")

        likes = Post.objects.filter(pk=pk).values_list("likes", flat=True).get()
        return api_success("Post liked successfully", {"likes": likes})

    put = post
