"""Registry operations behind the HTTP views.

connect → upsert by lowercase address (counter +1, reactivate), list/get active
rows, and soft-delete. Each operation touches a single row inside
transaction.atomic; database failures surface as PersistenceError and are not retried.
"""
import logging

from django.core.exceptions import ValidationError
from django.db import transaction, DatabaseError
from django.db.models import F
from django.utils import timezone

from .models import Wallet
from .constants import DEFAULT_NETWORK, NETWORK_MAX_LENGTH, is_valid_address, normalize_address

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
	"""No wallet row matches the requested address."""


class PersistenceError(Exception):
	"""The store was unreachable or rejected a write. Carries the driver message."""


def validate_address(address) -> str:
	"""
	Return the lowercase form of a well-formed address or raise ValidationError.
	"""
	if not address:
		raise ValidationError("Wallet address is required")
	if not isinstance(address, str) or not is_valid_address(address):
		raise ValidationError("Invalid Ethereum address format")
	return address.lower()


def _clean_network(network) -> str:
	if network is None:
		return DEFAULT_NETWORK
	network = str(network)
	if len(network) > NETWORK_MAX_LENGTH:
		raise ValidationError("Network label is too long")
	return network


def connect_wallet(address, network=None) -> tuple[Wallet, bool]:
	"""
	Record a successful wallet connection.

	Creates the row on first sight (connection_count=1). Otherwise bumps the
	counter, refreshes last_connected, overwrites network and forces
	is_active=True, so a deactivated wallet comes back with its history.

	Idempotence of creation: ensured by Wallet.address uniqueness; get_or_create
	re-reads the winner's row if a concurrent first connect raced us.
	Returns (wallet, created).
	"""
	address = validate_address(address)
	network = _clean_network(network)
	now = timezone.now()

	try:
		with transaction.atomic():
			wallet, created = Wallet.objects.select_for_update().get_or_create(
				address=address,
				defaults=dict(network=network, connected_at=now, last_connected=now),
			)
			if not created:
				wallet.connection_count = F("connection_count") + 1
				# Never before connected_at (a racing first connect may have won) and never backwards
				wallet.last_connected = max(timezone.now(), wallet.connected_at, wallet.last_connected)
				wallet.network = network
				wallet.is_active = True
				wallet.save(update_fields=["connection_count", "last_connected", "network", "is_active", "updated_at"])
				wallet.refresh_from_db(fields=["connection_count"])
	except DatabaseError as e:
		logger.exception("connect failed for %s", address)
		raise PersistenceError(str(e)) from e

	if created:
		logger.info("wallet %s connected on %s", address, network)
	else:
		logger.info("wallet %s reconnected on %s (count=%s)", address, network, wallet.connection_count)
	return wallet, created


def list_active_wallets() -> list[Wallet]:
	"""
	Active wallets, most recently connected first
	"""
	try:
		return list(Wallet.objects.filter(is_active=True).order_by("-last_connected"))
	except DatabaseError as e:
		raise PersistenceError(str(e)) from e


def get_active_wallet(address: str) -> Wallet:
	address = normalize_address(address)
	try:
		return Wallet.objects.get(address=address, is_active=True)
	except Wallet.DoesNotExist:
		raise NotFoundError(address)
	except DatabaseError as e:
		raise PersistenceError(str(e)) from e


def deactivate_wallet(address: str) -> Wallet:
	"""
	Soft-delete: flip is_active off whatever its current value (idempotent).
	Raises NotFoundError only when no row exists for the address at all.
	"""
	address = normalize_address(address)
	try:
		with transaction.atomic():
			# update() skips auto_now, so stamp updated_at by hand
			updated = Wallet.objects.filter(address=address).update(is_active=False, updated_at=timezone.now())
			if not updated:
				raise NotFoundError(address)
			wallet = Wallet.objects.get(address=address)
	except DatabaseError as e:
		logger.exception("deactivate failed for %s", address)
		raise PersistenceError(str(e)) from e

	logger.info("wallet %s deactivated", address)
	return wallet
