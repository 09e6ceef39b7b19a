"""Development entrypoint: ``python app.py``."""

import os

from src.hr_messaging.hr_messaging.main import create_app

app, socketio = create_app()


if __name__ == "__main__":
    socketio.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5000")),
        debug=app.config["DEBUG"],
        allow_unsafe_werkzeug=True,
    )
