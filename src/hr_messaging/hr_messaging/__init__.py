"""HR realtime messaging package.

Organized by feature modules (conversations, departments, notifications, chat,
realtime) with a thin Socket.IO controller layer over service/repository layers.
"""
