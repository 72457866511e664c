from django.contrib import admin
from .models import Post


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'category', 'author', 'featured', 'views', 'likes', 'published_at')
    list_filter = ('status', 'category', 'featured')
    search_fields = ('title', 'description', 'author__email')
    readonly_fields = ('views', 'likes', 'published_at', 'created_at', 'updated_at')
