"""
Love Nest - Admin Configuration

Admin interface for linking partners and looking after journal rows.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth import get_user_model
from .models import ChatMessage, DiaryEntry, Photo, PlaylistItem, Post, Profile, Quote, Reaction

User = get_user_model()


def short(text, length=60):
    text = text or ''
    return text[:length] + '...' if len(text) > length else text


# Inline Profile in User admin
class ProfileInline(admin.StackedInline):
    model = Profile
    can_delete = False
    verbose_name_plural = 'Profile'
    fk_name = 'user'
    fields = ['name', 'partner', 'avatar']


class UserAdmin(BaseUserAdmin):
    inlines = [ProfileInline]
    list_display = ['username', 'email', 'get_display_name', 'get_partner', 'is_staff']

    def get_display_name(self, obj):
        if hasattr(obj, 'profile'):
            return obj.profile.name
        return obj.username
    get_display_name.short_description = 'Display Name'

    def get_partner(self, obj):
        if hasattr(obj, 'profile') and obj.profile.partner:
            return obj.profile.partner.name
        return '-'
    get_partner.short_description = 'Partner'


# Re-register User with our custom admin
admin.site.unregister(User)
admin.site.register(User, UserAdmin)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['name', 'user', 'partner', 'is_linked', 'created_at']
    search_fields = ['name', 'user__username', 'user__email']
    raw_id_fields = ['user', 'partner']
    readonly_fields = ['id', 'created_at']

    def is_linked(self, obj):
        return obj.partner_id is not None
    is_linked.boolean = True
    is_linked.short_description = 'Linked'


class ReactionInline(admin.TabularInline):
    model = Reaction
    extra = 0
    raw_id_fields = ['owner']


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = ['owner', 'content_short', 'mood', 'is_miss_you', 'created_at']
    list_filter = ['mood', 'is_miss_you', 'created_at']
    search_fields = ['content', 'owner__name']
    ordering = ['-created_at']
    date_hierarchy = 'created_at'
    raw_id_fields = ['owner']
    inlines = [ReactionInline]

    def content_short(self, obj):
        return short(obj.content)
    content_short.short_description = 'Post'


@admin.register(DiaryEntry)
class DiaryEntryAdmin(admin.ModelAdmin):
    list_display = ['owner', 'date', 'mood', 'content_short', 'updated_at']
    list_filter = ['mood', 'date']
    search_fields = ['content', 'owner__name']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['-date']
    date_hierarchy = 'date'
    raw_id_fields = ['owner']

    def content_short(self, obj):
        return short(obj.content)
    content_short.short_description = 'Entry'


@admin.register(PlaylistItem)
class PlaylistItemAdmin(admin.ModelAdmin):
    list_display = ['title', 'owner', 'url', 'added_at']
    search_fields = ['title', 'owner__name']
    ordering = ['-added_at']
    raw_id_fields = ['owner']


@admin.register(Photo)
class PhotoAdmin(admin.ModelAdmin):
    list_display = ['caption', 'owner', 'url', 'uploaded_at']
    search_fields = ['caption', 'owner__name']
    ordering = ['-uploaded_at']
    raw_id_fields = ['owner']


@admin.register(Quote)
class QuoteAdmin(admin.ModelAdmin):
    list_display = ['text_short', 'author', 'owner', 'is_read', 'created_at']
    list_filter = ['is_read', 'created_at']
    search_fields = ['text', 'owner__name', 'author__name']
    ordering = ['-created_at']
    raw_id_fields = ['owner', 'author']

    def text_short(self, obj):
        return short(obj.text)
    text_short.short_description = 'Note'


@admin.register(ChatMessage)
class ChatMessageAdmin(admin.ModelAdmin):
    list_display = ['sender', 'text_short', 'is_read', 'sent_at']
    list_filter = ['is_read', 'sent_at']
    search_fields = ['text', 'sender__name']
    ordering = ['-sent_at']
    raw_id_fields = ['sender']

    def text_short(self, obj):
        return short(obj.text)
    text_short.short_description = 'Message'
