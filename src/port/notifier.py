"""Notifier port: outbound delivery of verification secrets."""

from typing import Protocol


class NotifierPort(Protocol):
    """Fire-and-forget delivery of a secret to a destination.

    Implementations must not raise or block on network I/O. Delivery may
    happen after the call returns; a failed delivery is logged by the adapter
    and never reported back to the caller.
    """

    def send_email_verification(self, email: str, secret: str) -> None: ...

    def send_phone_code(self, phone_number: str, code: str) -> None: ...
