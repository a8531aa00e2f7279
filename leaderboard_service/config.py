import os

PORT = int(os.getenv("PORT", "3000"))
HOST = os.getenv("HOST", "0.0.0.0")

LEADERBOARD_BUCKET = os.getenv("LEADERBOARD_BUCKET", "minesweeper-leaderboard")
LEADERBOARD_KEY = os.getenv("LEADERBOARD_KEY", "leaderboard.json")

# "s3" or "memory"
STORE_BACKEND = os.getenv("STORE_BACKEND", "s3")
AWS_REGION = os.getenv("AWS_REGION") or None

ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
