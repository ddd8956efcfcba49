from django.contrib import admin

from .models import (
    AssignmentRecord,
    Comment,
    CommentAttachment,
    Complaint,
    Rating,
    TechnicianPhoto,
)


class AssignmentRecordInline(admin.TabularInline):
    model = AssignmentRecord
    extra = 0
    readonly_fields = ("department", "technician", "assigned_by",
                       "note", "assigned_at", "is_active")
    can_delete = False


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ("id", "problem_type", "status", "reporter",
                    "department", "assigned_technician", "created_at")
    list_filter = ("status", "department")
    search_fields = ("problem_type", "address", "description")
    inlines = [AssignmentRecordInline]


@admin.register(AssignmentRecord)
class AssignmentRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "complaint", "department", "technician",
                    "assigned_by", "assigned_at", "is_active")
    list_filter = ("is_active", "department")


@admin.register(Rating)
class RatingAdmin(admin.ModelAdmin):
    list_display = ("id", "complaint", "reporter", "score",
                    "created_at", "last_modified_at")
    readonly_fields = ("created_at",)


class CommentAttachmentInline(admin.TabularInline):
    model = CommentAttachment
    extra = 0


@admin.register(Comment)
class CommentAdmin(admin.ModelAdmin):
    list_display = ("id", "complaint", "author_name", "author_role",
                    "visible_to_reporter", "created_at")
    list_filter = ("author_role", "visible_to_reporter")
    search_fields = ("content",)
    inlines = [CommentAttachmentInline]


@admin.register(TechnicianPhoto)
class TechnicianPhotoAdmin(admin.ModelAdmin):
    list_display = ("id", "complaint", "technician", "photo_type", "uploaded_at")
    list_filter = ("photo_type",)
