from django.contrib import admin
from .models import LedgerEntry


@admin.register(LedgerEntry)
class LedgerEntryAdmin(admin.ModelAdmin):
    list_display = ('membership', 'amount', 'balance_after', 'reason', 'activity_title', 'created_at')
    list_filter = ('reason',)
    search_fields = ('membership__user__email', 'activity_title')
    readonly_fields = [f.name for f in LedgerEntry._meta.fields]

    def has_add_permission(self, request):
        return False
