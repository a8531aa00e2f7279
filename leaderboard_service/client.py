import requests


class LeaderboardClient:
    """Thin HTTP client for game builds and scripts talking to the service."""

    def __init__(self, base_url: str, timeout: float = 10.0):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def submit(self, username, score, time, difficulty) -> dict:
        """POST a score as JSON. Returns the ``{success, message}`` body.

        A 400 (rejected entry) comes back as a body with ``success`` false;
        any other error status raises ``requests.HTTPError``.
        """
        body = {"username": username, "score": score, "time": time, "difficulty": difficulty}
        r = requests.post(f"{self.base_url}/submit", json=body, timeout=self.timeout)
        if r.status_code == 400:
            return r.json()
        r.raise_for_status()
        return r.json()

    def fetch_raw(self, refresh: bool = False) -> list:
        params = {"refresh": "true"} if refresh else None
        r = requests.get(f"{self.base_url}/raw", params=params, timeout=self.timeout)
        r.raise_for_status()
        return r.json()["users"]

    def add(self, password, username, score, time, difficulty) -> bool:
        form = {
            "password": password,
            "username": username,
            "score": score,
            "time": time,
            "difficulty": difficulty,
        }
        r = requests.post(f"{self.base_url}/add", data=form, timeout=self.timeout)
        if r.status_code == 401:
            return False
        r.raise_for_status()
        return True

    def erase(self, password) -> bool:
        r = requests.post(f"{self.base_url}/erase", data={"password": password}, timeout=self.timeout)
        if r.status_code == 401:
            return False
        r.raise_for_status()
        return True
