from django.contrib import admin
from .models import Group, Membership

@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ('name', 'created_by', 'created_at')
    search_fields = ('name',)
    list_filter = ('created_at',)

@admin.register(Membership)
class MembershipAdmin(admin.ModelAdmin):
    list_display = ('user', 'group', 'role', 'points', 'joined_at')
    list_filter = ('role', 'group')
    search_fields = ('user__email', 'user__name', 'group__name')
    # Balances change through the ledger, not by hand here
    readonly_fields = ('points',)
