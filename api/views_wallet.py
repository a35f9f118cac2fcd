"""Wallet registry endpoints (connect, list, fetch, deactivate).

Every response carries "success"; failures add "error" and, for store
failures, the underlying "message" for diagnostics.
"""

import json
import logging
from django.core.exceptions import ValidationError
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from wallets.services import (
	NotFoundError, PersistenceError, connect_wallet, list_active_wallets, get_active_wallet, deactivate_wallet,
)
from .views_ops import route_not_found

logger = logging.getLogger(__name__)


def _iso(dt):
	return dt.isoformat().replace("+00:00", "Z") if dt else None


def _wallet_json(w, fields):
	full = {
		"address": w.address,
		"network": w.network,
		"connectedAt": _iso(w.connected_at),
		"lastConnected": _iso(w.last_connected),
		"connectionCount": w.connection_count,
		"isActive": w.is_active,
		"createdAt": _iso(w.created_at),
		"updatedAt": _iso(w.updated_at),
	}
	return {k: full[k] for k in fields} if fields else full


def _failure(error, status, exc=None):
	body = {"success": False, "error": error}
	if exc is not None:
		body["message"] = str(exc)
	return JsonResponse(body, status=status)


def _not_found():
	return _failure("Wallet not found", 404)


@csrf_exempt
def connect(request):
	"""
	POST: Save (or refresh) a connecting wallet; 201 on first sight, 200 on reconnect
	"""
	if request.method != "POST":
		return route_not_found(request)

	try:
		body = json.loads(request.body or b"{}")
	except ValueError:
		return _failure("Invalid JSON", 400)
	if not isinstance(body, dict):
		return _failure("Invalid JSON", 400)

	try:
		wallet, created = connect_wallet(body.get("address"), body.get("network"))
	except ValidationError as e:
		return _failure(e.message, 400)
	except PersistenceError as e:
		return _failure("Failed to connect wallet", 500, e)

	if created:
		return JsonResponse({
			"success": True,
			"message": "Wallet connected successfully",
			"data": _wallet_json(wallet, ["address", "network", "connectionCount", "connectedAt"]),
		}, status=201)

	return JsonResponse({
		"success": True,
		"message": "Wallet reconnected successfully",
		"data": _wallet_json(wallet, ["address", "network", "connectionCount", "lastConnected"]),
	})


def addresses(request):
	"""
	GET: Active wallets, most recently connected first
	"""
	if request.method != "GET":
		return route_not_found(request)

	try:
		wallets = list_active_wallets()
	except PersistenceError as e:
		return _failure("Failed to fetch wallet addresses", 500, e)

	fields = ["address", "network", "connectedAt", "lastConnected", "connectionCount"]
	return JsonResponse({
		"success": True,
		"count": len(wallets),
		"data": [_wallet_json(w, fields) for w in wallets],
	})


@csrf_exempt
def address_detail(request, address: str):
	"""
	GET: One active wallet by address (any case)
	DELETE: Soft-delete the wallet; repeat calls keep succeeding
	"""
	if request.method == "GET":
		try:
			wallet = get_active_wallet(address)
		except NotFoundError:
			return _not_found()
		except PersistenceError as e:
			return _failure("Failed to fetch wallet", 500, e)
		return JsonResponse({"success": True, "data": _wallet_json(wallet, None)})

	if request.method == "DELETE":
		try:
			wallet = deactivate_wallet(address)
		except NotFoundError:
			return _not_found()
		except PersistenceError as e:
			return _failure("Failed to deactivate wallet", 500, e)
		return JsonResponse({
			"success": True,
			"message": "Wallet deactivated successfully",
			"data": _wallet_json(wallet, ["address", "isActive"]),
		})

	return route_not_found(request)
