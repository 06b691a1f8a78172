"""Helpers shared by test modules."""

import json


def make_line(
    method: str = "GET",
    path: str = "/",
    status: str | int = "200",
    host: str = "example.com",
    request_time: str | float = "0.010",
) -> str:
    """Build one nginx JSON access log line, newline-terminated."""
    entry = {
        "http": {"response": {"status_code": status}},
        "nginx": {
            "access": {"method": method, "url": path, "host": host},
            "time": {"request": request_time},
        },
    }
    return json.dumps(entry) + "\n"
