"""Public API surface.

- /health: liveness probe
- /wallet/connect: upsert a connecting wallet
- /wallet/addresses: list active wallets
- /wallet/address/<address>: fetch (GET) or deactivate (DELETE) one wallet
"""

from django.urls import path
from .views_ops import health
from .views_wallet import connect, addresses, address_detail


urlpatterns = [
	path("health", health),
	path("wallet/connect", connect, name="wallet_connect"),
	path("wallet/addresses", addresses, name="wallet_addresses"),
	path("wallet/address/<str:address>", address_detail, name="wallet_address_detail"),
]
