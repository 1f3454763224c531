# demo accounts written to the store when no user list exists yet
from datetime import datetime
from typing import List

from db.models import UserRecord

DEFAULT_USERS: List[UserRecord] = [
    UserRecord(
        uid=1,
        email="admin@organi.live",
        pwd="123456",
        first_name="Admin",
        last_name="System",
        phone="+57 300 000 0000",
        registered_at=datetime(2023, 1, 1),
        avatar="https://images.unsplash.com/photo-1472099645785-5658abf4ff4e?w=150&h=150&fit=crop&crop=face",
    ),
    UserRecord(
        uid=2,
        email="usuario@test.com",
        pwd="password123",
        first_name="Test",
        last_name="User",
        phone="+57 300 111 1111",
        registered_at=datetime(2023, 6, 15, 10, 30),
        avatar="https://images.unsplash.com/photo-1494790108755-2616b612b786?w=150&h=150&fit=crop&crop=face",
    ),
]
