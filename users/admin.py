from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from .models import User

@admin.register(User)
class CustomUserAdmin(UserAdmin):
    list_display = ('username', 'email', 'name', 'role', 'is_active', 'is_staff', 'last_login')
    list_filter = ('role', 'is_staff', 'is_superuser', 'is_active')
    search_fields = ('username', 'email', 'name')
    fieldsets = UserAdmin.fieldsets + (
        ('Hub', {'fields': ('name', 'role', 'profile_image')}),
    )
    add_fieldsets = UserAdmin.add_fieldsets + (
        ('Hub', {'fields': ('email', 'name', 'role')}),
    )
