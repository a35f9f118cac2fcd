"""Database models for the wallet registry.


Tables:
- Wallet: one row per address that ever connected (soft-deleted rows stay)
"""

import uuid
from django.db import models
from django.db.models import F, Q
from django.utils.timezone import now
from .constants import DEFAULT_NETWORK


class Wallet(models.Model):
	"""
	A browser wallet that connected at least once.

	address is stored lowercase and is unique across active and inactive rows,
	so a reconnect after deactivation reuses (and reactivates) the same row.
	"""
	id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
	address = models.CharField(max_length=42, unique=True) # 0x + 40 hex, lowercase
	network = models.CharField(max_length=100, default=DEFAULT_NETWORK)
	connected_at = models.DateTimeField(default=now)
	last_connected = models.DateTimeField(default=now)
	connection_count = models.PositiveIntegerField(default=1)
	is_active = models.BooleanField(default=True)
	created_at = models.DateTimeField(auto_now_add=True)
	updated_at = models.DateTimeField(auto_now=True)

	class Meta:
		indexes = [
			models.Index(fields=["-connected_at"], name="wallet_connected_at_idx"),
		]
		constraints = [
			models.CheckConstraint(condition=Q(connection_count__gte=1), name="wallet_connection_count_gte_1"),
			models.CheckConstraint(condition=Q(last_connected__gte=F("connected_at")), name="wallet_last_after_first"),
		]

	def __str__(self):
		return f"{self.address} ({self.network})"
