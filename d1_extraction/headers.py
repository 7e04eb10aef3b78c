"""
Security header flags and hosting/CDN detection from response headers

Presence checks only; header values are not validated.
"""
import re
from typing import Any, Dict, Mapping, Optional

HOSTING_RULES = {
    "cloudflare": (re.compile(r"cloudflare", re.I), ("cf-ray",)),
    "aws": (re.compile(r"amazonaws|awselb|amazons3|cloudfront", re.I), ("x-amz-cf-id",)),
    "vercel": (re.compile(r"vercel", re.I), ("x-vercel-id",)),
    "netlify": (re.compile(r"netlify", re.I), ("x-nf-request-id",)),
    "fastly": (re.compile(r"fastly", re.I), ("x-fastly-request-id",)),
    "google": (re.compile(r"\bgws\b|google", re.I), ()),
}


def _lower(headers: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    return {str(k).lower(): str(v) for k, v in (headers or {}).items()}


def detect_security(headers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    h = _lower(headers)
    return {
        "hasCSP": bool(h.get("content-security-policy")),
        "hasHSTS": bool(h.get("strict-transport-security")),
        "hasXFrame": bool(h.get("x-frame-options")),
        "hasXSSProtection": bool(h.get("x-xss-protection")),
        "serverHeader": h.get("server") or None,
    }


def detect_hosting(headers: Optional[Mapping[str, Any]]) -> Dict[str, bool]:
    h = _lower(headers)
    server = " ".join(filter(None, [h.get("server"), h.get("via"), h.get("x-powered-by")]))
    return {
        provider: bool(pattern.search(server)) or any(h.get(marker) for marker in markers)
        for provider, (pattern, markers) in HOSTING_RULES.items()
    }


def security_score(security: Mapping[str, Any]) -> int:
    """CSP 33 + HSTS 33 + X-Frame-Options 34"""
    return (
        (33 if security.get("hasCSP") else 0)
        + (33 if security.get("hasHSTS") else 0)
        + (34 if security.get("hasXFrame") else 0)
    )
