from typing import Protocol, Optional
from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserRecord:
    id: str
    phone_number: str
    name: Optional[str]
    status: str
    created_at: datetime

    @property
    def is_suspended(self) -> bool:
        return self.status == "suspended"


class UserDirectory(Protocol):
    def get_by_phone(self, phone_number: str) -> Optional[UserRecord]:
        ...

    def get_by_id(self, user_id: str) -> Optional[UserRecord]:
        ...
