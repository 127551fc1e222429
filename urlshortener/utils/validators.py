"""URL and shortcode validation helpers

Functions:
    is_url(url) -> bool
        Check that a string is a syntactically valid http(s) URL
        (the scheme may be omitted).
    targets_domain(url, domain) -> bool
        Check whether a URL points at the given domain (redirect-loop guard).
    enforce_http(url) -> str
        Ensure a URL carries an explicit scheme.
    is_valid_custom_shortcode(shortcode) -> bool
        Check that a caller-supplied shortcode is a safe path segment.

Example:
    >>> is_url('example.com/some/page')
    True
    >>> is_url('not a url')
    False
    >>> targets_domain('https://www.short.ly/abc123', 'short.ly')
    True
    >>> enforce_http('example.com')
    'http://example.com'
"""

import re
import ipaddress
import urllib.parse

from urlshortener.constants import MAX_URL_LENGTH, Shortcode


_HOST_LABEL = re.compile(r'^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$')
_CUSTOM_SHORTCODE = re.compile(Shortcode.CUSTOM_PATTERN)
_SCHEME = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*://')


def enforce_http(url: str) -> str:
    if _SCHEME.match(url):
        return url
    return f'http://{url}'


def _is_hostname(hostname: str) -> bool:
    if hostname == 'localhost':
        return True

    try:
        ipaddress.ip_address(hostname)
    except ValueError:
        pass
    else:
        return True

    labels = hostname.rstrip('.').split('.')
    # fmt: off
    return (len(labels) >= 2
            and all(_HOST_LABEL.match(label) for label in labels)
            and not labels[-1].isdigit())
    # fmt: on


def is_url(url: str) -> bool:
    """Check that `url` is a syntactically valid http(s) URL

    The scheme is optional ('example.com' is accepted and later normalized),
    but when present it must be http or https. The host must be 'localhost',
    an IP address, or a dotted hostname.
    """
    if not isinstance(url, str) or not url or len(url) > MAX_URL_LENGTH:
        return False
    if any(ch.isspace() for ch in url):
        return False

    try:
        components = urllib.parse.urlsplit(enforce_http(url))
        hostname = components.hostname
        components.port  # raises ValueError on a malformed port
    except ValueError:
        return False

    if components.scheme.lower() not in {'http', 'https'} or not hostname:
        return False
    return _is_hostname(hostname)


def _strip_www(netloc: str) -> str:
    return netloc[4:] if netloc.startswith('www.') else netloc


def targets_domain(url: str, domain: str | None) -> bool:
    """Check whether `url` points at `domain`

    Comparison ignores the scheme, a leading 'www.', the path and letter case.
    If `domain` carries a port, the port must match too.

    Args:
        url (str): candidate target URL (scheme optional)
        domain (str | None): this service's own domain, e.g. 'short.ly' or 'localhost:3000'

    Returns:
        bool: True if the URL would redirect back to this service
    """
    if not domain:
        return False

    own = urllib.parse.urlsplit(enforce_http(domain))
    target = urllib.parse.urlsplit(enforce_http(url))

    own_netloc = _strip_www(own.netloc.lower())
    target_netloc = _strip_www(target.netloc.lower().rsplit('@', 1)[-1])
    if ':' in own_netloc:
        return target_netloc == own_netloc
    return target_netloc.split(':', 1)[0] == own_netloc


def is_valid_custom_shortcode(shortcode: str) -> bool:
    return isinstance(shortcode, str) and bool(_CUSTOM_SHORTCODE.fullmatch(shortcode))
