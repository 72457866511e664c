from django.contrib import admin
from .models import Event


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'event_type', 'category', 'date', 'current_attendees', 'max_attendees', 'featured')
    list_filter = ('status', 'event_type', 'category', 'featured', 'date')
    search_fields = ('title', 'description', 'location', 'author__email')
    readonly_fields = ('slug', 'created_at', 'updated_at')
    date_hierarchy = 'date'
