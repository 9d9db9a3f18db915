import os

from src.classroom_attendance.classroom_attendance.main import create_app

app = create_app()


if __name__ == "__main__":
    # Listen on all interfaces so the mobile client can reach the API over the LAN.
    app.run(host=os.getenv("HOST", "0.0.0.0"), port=int(os.getenv("PORT", "5000")))
