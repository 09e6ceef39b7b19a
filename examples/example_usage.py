"""Example: publish an HR notification through the service layer (no Socket.IO).

Any connected client of the target user receives it as a ``notify`` event;
here the gateway just prints what would be emitted.
"""

import importlib

from config import get_settings_module

from src.hr_messaging.hr_messaging.container import build_container
from src.hr_messaging.hr_messaging.notifications.producers import notify_leave_decision


class PrintGateway:
    def emit(self, event, payload, *, room):
        print(f"emit {event} -> {room}: {payload}")

    def enter_room(self, sid, room):
        print(f"{sid} joined {room}")


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=settings.DB_CONFIG,
        gateway=PrintGateway(),
        jwt_secret=settings.JWT_SECRET,
    )
    try:
        record = notify_leave_decision(container.notification_service, user_id=3, approved=True)
        print(record)
    finally:
        container.close()


if __name__ == "__main__":
    main()
