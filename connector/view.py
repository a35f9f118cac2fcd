"""What the connector shows, as plain data (no markup)."""

from dataclasses import dataclass

INSTALL = "install"
CONNECT = "connect"
ACCOUNT = "account"


def format_address(address: str) -> str:
	"""
	Shorten an address for display: 0x1234...abcd
	"""
	if not address:
		return ""
	return f"{address[:6]}...{address[-4:]}"


@dataclass(frozen=True)
class ConnectorView:
	kind: str  # INSTALL | CONNECT | ACCOUNT
	title: str
	message: str = ""
	error: str = ""
	install_url: str = ""
	account_display: str = ""
	network_name: str = ""
	clipboard_text: str = ""  # full address for "Copy Address"
