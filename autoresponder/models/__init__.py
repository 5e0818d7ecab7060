from autoresponder.models.account import Account
from autoresponder.models.response_entry import ResponseEntry

__all__ = [
    "Account",
    "ResponseEntry",
]
