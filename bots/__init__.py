"""Decision providers for non-human seats: house bots and remote bots over WebSockets."""

from .house import SimpleDecisionProvider, StyleDecisionProvider
from .remote import RemoteDecisionProvider

__all__ = ["SimpleDecisionProvider", "StyleDecisionProvider", "RemoteDecisionProvider"]
