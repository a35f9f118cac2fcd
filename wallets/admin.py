from django.contrib import admin
from .models import Wallet


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
	list_display = ("address", "network", "connection_count", "last_connected", "is_active")
	list_filter = ("is_active", "network")
	search_fields = ("address",)
	readonly_fields = ("connected_at", "created_at", "updated_at")
