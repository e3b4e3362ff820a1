"""Return URL handling."""
from urllib.parse import urlsplit


def is_local_url(url: str) -> bool:
    """
    Checks whether a return URL stays within this application.

    Relative paths are local. Anything with a scheme or a host, including
    protocol-relative URLs like ``//example.com``, is not.
    """
    if not url or len(url) >= 300:
        return False
    if url.startswith('//') or url.startswith('\\') or url.startswith('/\\'):
        return False
    parts = urlsplit(url)
    return not parts.scheme and not parts.netloc
