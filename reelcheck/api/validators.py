from typing import Any

import requests


class APIError(AssertionError):
    """API response did not match the expectation"""
    pass


def _lookup_path(data: Any, json_path: str) -> Any:
    current = data
    for part in json_path.split("."):
        if isinstance(current, list):
            current = current[int(part)]
        elif isinstance(current, dict):
            current = current[part]
        else:
            raise KeyError(part)
    return current


class APIValidator:

    @staticmethod
    def validate_status_code(response: requests.Response, expected: int):
        if response.status_code != expected:
            raise APIError(
                f"{response.request.method} {response.url}: expected status {expected}, "
                f"got {response.status_code}"
            )

    @staticmethod
    def validate_response_field(response: requests.Response, json_path: str, expected_value: Any):
        """Compare the value at a dotted path (``data.0.name``) with ``expected_value``."""
        try:
            actual = _lookup_path(response.json(), json_path)
        except (KeyError, IndexError, ValueError) as e:
            raise APIError(f"Field '{json_path}' not found in response: {e}") from e
        if actual != expected_value:
            raise APIError(f"Field '{json_path}': expected {expected_value!r}, got {actual!r}")
