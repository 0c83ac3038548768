from typing import Protocol


class SmsChannel(Protocol):
    def send(self, phone_number: str, message: str) -> bool:
        """True once the message is handed off; raises DeliveryFailure otherwise."""
        ...
