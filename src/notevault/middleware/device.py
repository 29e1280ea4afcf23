"""Device label of the calling client."""

from fastapi import Request

DEVICE_HEADER = "x-device"
UNKNOWN_DEVICE = "unknown"
MAX_DEVICE_LENGTH = 255


def get_device_label(request: Request) -> str:
    """``X-Device`` header, else the User-Agent, else ``"unknown"``.

    Refresh tokens are bound to this label, so a token only refreshes from
    the client that received it.
    """
    label = request.headers.get(DEVICE_HEADER) or request.headers.get("user-agent") or ""
    label = label.strip()[:MAX_DEVICE_LENGTH]
    return label or UNKNOWN_DEVICE
