"""
URL to bare-hostname normalization.
"""

from urllib.parse import urlsplit

WWW_PREFIX = "www."


def _strip_www(host: str) -> str:
    if host.startswith(WWW_PREFIX):
        return host[len(WWW_PREFIX) :]
    return host


def extract_domain(url: str) -> str:
    """
    Normalize a URL into a bare hostname without a leading "www.".

    Resolution order:
    1. Parse as a URL; if it has a scheme and a hostname, use the hostname
       (lower-cased by the parser).
    2. Split on "/" and take the authority segment: index 2 when the string
       carries a "//" marker ("http://bad host/x"), otherwise index 0
       ("example.com/page/x").
    3. If that segment is empty, return the input unchanged.

    Args:
        url: Source URL as supplied by the answer's search step

    Returns:
        Bare domain, or the original string when nothing better is found

    Examples:
        >>> extract_domain("https://www.example.com/page")
        'example.com'
        >>> extract_domain("example.com/page/x")
        'example.com'
        >>> extract_domain("")
        ''
    """
    try:
        parts = urlsplit(url)
        if parts.scheme and parts.hostname:
            return _strip_www(parts.hostname)
    except ValueError:
        # Malformed netloc (e.g. unbalanced IPv6 brackets); use the split fallback
        pass

    segments = url.split("/")
    segment_index = 2 if "//" in url else 0
    if segment_index < len(segments) and segments[segment_index]:
        return _strip_www(segments[segment_index]) or url

    return url
