from django.contrib import admin
from .models import Activity, Submission, Review


class ReviewInline(admin.TabularInline):
    model = Review
    extra = 0
    readonly_fields = ('reviewer', 'approved', 'comment', 'created_at')
    can_delete = False


@admin.register(Activity)
class ActivityAdmin(admin.ModelAdmin):
    list_display = ('title', 'group', 'points', 'created_at')
    list_filter = ('group',)
    search_fields = ('title', 'description')


@admin.register(Submission)
class SubmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'user', 'activity', 'submission_date', 'status', 'created_at')
    list_filter = ('status', 'submission_date')
    search_fields = ('user__email', 'activity__title')
    # Status only moves through the quorum engine
    readonly_fields = ('status',)
    exclude = ('proofs',)
    inlines = [ReviewInline]


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('submission', 'reviewer', 'approved', 'created_at')
    list_filter = ('approved',)
