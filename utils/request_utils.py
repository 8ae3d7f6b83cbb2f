"""
RecipeShare Request Utilities
Helper functions for extracting request information
"""

from fastapi import Request
from typing import Dict, Any
import ipaddress
from user_agents import parse


def get_client_ip(request: Request) -> str:
    """
    Extract client IP address from request headers

    Honors the usual reverse proxy headers before falling back to the peer address
    """
    headers_to_check = [
        "x-forwarded-for",   # Standard proxy header
        "x-real-ip",         # Nginx proxy
        "cf-connecting-ip",  # Cloudflare
    ]

    for header in headers_to_check:
        ip = request.headers.get(header)
        if ip:
            # X-Forwarded-For can contain multiple IPs, the first is the client
            if "," in ip:
                ip = ip.split(",")[0].strip()

            if _is_valid_ip(ip):
                return ip

    if request.client and request.client.host:
        return request.client.host

    return "unknown"


def get_user_agent(request: Request) -> str:
    """Extract user agent from request headers"""
    return request.headers.get("user-agent", "Unknown")


def parse_user_agent(user_agent: str) -> Dict[str, Any]:
    """Parse a user agent string into browser/OS/device families"""
    parsed = parse(user_agent)
    return {
        "browser": parsed.browser.family,
        "os": parsed.os.family,
        "device": parsed.device.family,
        "is_mobile": parsed.is_mobile,
        "is_bot": parsed.is_bot,
        "raw": user_agent,
    }


def extract_request_context(request: Request) -> Dict[str, Any]:
    """
    Extract context from request for security logging
    """
    return {
        "request_id": getattr(request.state, "request_id", None),
        "method": request.method,
        "path": request.url.path,
        "ip": get_client_ip(request),
        "user_agent": parse_user_agent(get_user_agent(request)),
    }


def _is_valid_ip(ip: str) -> bool:
    try:
        ipaddress.ip_address(ip)
        return True
    except ValueError:
        return False
