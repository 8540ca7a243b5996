"""In-memory implementation of NotifierPort for testing."""


class FakeNotifier:
    """Records every delivery instead of sending it."""

    def __init__(self):
        self.emails: list[tuple[str, str]] = []
        self.sms: list[tuple[str, str]] = []

    def send_email_verification(self, email: str, secret: str) -> None:
        self.emails.append((email, secret))

    def send_phone_code(self, phone_number: str, code: str) -> None:
        self.sms.append((phone_number, code))

    @property
    def last_email_secret(self) -> str | None:
        return self.emails[-1][1] if self.emails else None

    @property
    def last_phone_code(self) -> str | None:
        return self.sms[-1][1] if self.sms else None
