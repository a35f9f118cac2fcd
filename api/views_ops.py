"""Service-level endpoints: API index, health probe and the JSON 404."""

from django.http import JsonResponse


def index(request):
	return JsonResponse({
		"message": "Wallet Registry API is running!",
		"endpoints": {
			"POST /api/wallet/connect": "Save wallet address to database",
			"GET /api/wallet/addresses": "Get all saved wallet addresses",
			"GET /api/wallet/address/<address>": "Get a saved wallet by address",
			"DELETE /api/wallet/address/<address>": "Deactivate a saved wallet",
		},
	})


def health(request):
	return JsonResponse({"ok": True})


def route_not_found(request):
	return JsonResponse({"error": "Route not found"}, status=404)
