from __future__ import annotations

from urllib.parse import quote, urlsplit, urlunsplit

from .errors import InvalidUrl

ALLOWED_HOSTS = frozenset(
    {
        "youtube.com",
        "www.youtube.com",
        "m.youtube.com",
        "youtu.be",
    }
)
_DEFAULT_PORTS = {"http": 80, "https": 443}

# Printable ASCII kept as-is per URL part; everything else is percent-encoded.
_PRINTABLE = "".join(chr(code) for code in range(0x21, 0x7F))
_PATH_SAFE = "".join(char for char in _PRINTABLE if char not in '"#<>?`{}')
_QUERY_SAFE = "".join(char for char in _PRINTABLE if char not in "\"#<>'")
_FRAGMENT_SAFE = "".join(char for char in _PRINTABLE if char not in '"<>`')


def normalize_video_url(value: str) -> str:
    """Return the canonical form of a video URL or raise InvalidUrl.

    Scheme and host are lowercased, the scheme's default port is dropped, an
    empty path becomes ``/`` and unsafe characters in path, query and
    fragment are percent-encoded. Existing escapes are left untouched.
    """
    text = value.strip()
    if not text:
        raise InvalidUrl()
    try:
        parsed = urlsplit(text)
        host = parsed.hostname
        port = parsed.port
    except ValueError as exc:
        raise InvalidUrl() from exc
    scheme = parsed.scheme.lower()
    if scheme not in _DEFAULT_PORTS:
        raise InvalidUrl()
    if host is None or host not in ALLOWED_HOSTS:
        raise InvalidUrl()
    if parsed.username is not None or parsed.password is not None:
        raise InvalidUrl()
    if port is None or port == _DEFAULT_PORTS[scheme]:
        netloc = host
    else:
        netloc = f"{host}:{port}"
    path = quote(parsed.path or "/", safe=_PATH_SAFE)
    query = quote(parsed.query, safe=_QUERY_SAFE)
    fragment = quote(parsed.fragment, safe=_FRAGMENT_SAFE)
    return urlunsplit((scheme, netloc, path, query, fragment))
