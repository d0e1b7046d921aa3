"""Client identification for rate limiting and request logs."""

from fastapi import Request


def get_client_ip(request: Request) -> str:
    """Extracts the real client IP from proxy headers, falling back to the socket peer."""
    cf_ip = request.headers.get("cf-connecting-ip")
    if cf_ip:
        return cf_ip

    x_forwarded = request.headers.get("x-forwarded-for")
    if x_forwarded:
        return x_forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    return request.client.host if request.client else "unknown"
