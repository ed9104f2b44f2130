"""
Input sanitization module.

This module strips markup and script vectors from free text and
normalizes URLs before they are stored or echoed back.
"""

import html
import ipaddress
import re
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from .errors import InvalidUrlError
from .security_logger import SecurityLogger


TAG_PATTERN = re.compile(r'<[^>]*>')
JAVASCRIPT_PROTOCOL_PATTERN = re.compile(r'javascript:', re.IGNORECASE)
EVENT_HANDLER_PATTERN = re.compile(r'on\w+=', re.IGNORECASE)
# Leftovers of a broken tag such as "<script" or "a >"
ANGLE_BRACKET_PATTERN = re.compile(r'[<>]')

ALLOWED_URL_SCHEMES = ('http', 'https')
DEFAULT_PORTS = {'http': 80, 'https': 443}
# Characters that can never appear literally in a URL
FORBIDDEN_URL_CHARS = re.compile(r'[\x00-\x20\x7f<>"{}|\\^`]')
HOST_LABEL_PATTERN = re.compile(r'^(?!-)[a-z0-9-]{1,63}(?<!-)$')


def _strip_unsafe(value: str) -> str:
    stripped = TAG_PATTERN.sub('', value)
    stripped = JAVASCRIPT_PROTOCOL_PATTERN.sub('', stripped)
    stripped = EVENT_HANDLER_PATTERN.sub('', stripped)
    if stripped != value:
        # Stray brackets go only once an unsafe pattern was removed
        stripped = ANGLE_BRACKET_PATTERN.sub('', stripped)
    return stripped


def sanitize_text(value: Any) -> str:
    """
    Sanitize free text.

    Removes HTML tags, the ``javascript:`` scheme and inline event handler
    attributes (``onclick=`` and friends). When one of those was found, any
    stray ``<`` or ``>`` left behind is removed too; text without them
    keeps its brackets, so "5 > 3" comes back unchanged. Null bytes are
    always dropped. Removal is repeated until nothing changes, so fragments
    that reassemble into a pattern ("javajavascript:script:") are caught
    and the result is idempotent.

    Args:
        value: Input value to sanitize

    Returns:
        Sanitized string, or '' for None/empty input
    """
    if value is None:
        return ''

    if not isinstance(value, str):
        value = str(value)

    original = value.replace('\x00', '').strip()
    cleaned = original
    while True:
        stripped = _strip_unsafe(cleaned)
        if stripped == cleaned:
            break
        cleaned = stripped
    cleaned = cleaned.strip()

    if cleaned != original:
        SecurityLogger.log_injection_attempt('XSS', original)

    return cleaned


def sanitize_email(value: Any) -> str:
    """Lowercase and strip an email address."""
    if value is None:
        return ''
    return str(value).strip().lower()


def escape_html(value: Any) -> str:
    """Escape text for safe inclusion in HTML output."""
    if value is None:
        return ''
    return html.escape(str(value), quote=True)


def _normalize_host(host: str) -> str:
    """Return the ASCII form of a hostname, or raise InvalidUrlError."""
    if ':' in host:
        try:
            ipaddress.IPv6Address(host)
        except ValueError as exc:
            raise InvalidUrlError('Invalid URL host') from exc
        return f'[{host}]'

    try:
        ascii_host = host.encode('idna').decode('ascii')
    except UnicodeError as exc:
        raise InvalidUrlError('Invalid URL host') from exc

    labels = ascii_host.lower().split('.')
    if not all(HOST_LABEL_PATTERN.match(label) for label in labels):
        raise InvalidUrlError('Invalid URL host')
    return '.'.join(labels)


def sanitize_url(value: Any) -> str:
    """
    Validate and normalize an absolute http(s) URL.

    The scheme and host are lower-cased, the default port is dropped and
    an empty path becomes '/'. Any other part of the URL is returned as
    given, so ``https://example.com/path?x=1`` comes back unchanged.

    Args:
        value: URL to sanitize

    Returns:
        The normalized URL, or '' for None/empty input

    Raises:
        InvalidUrlError: If the URL cannot be parsed, has no host, contains
            characters that are not legal in a URL, or uses a scheme other
            than http/https
    """
    if value is None:
        return ''

    url = str(value).strip()
    if not url:
        return ''

    if FORBIDDEN_URL_CHARS.search(url):
        SecurityLogger.log_injection_attempt('URL', url)
        raise InvalidUrlError('Invalid URL')

    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise InvalidUrlError('Invalid URL') from exc

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_URL_SCHEMES:
        raise InvalidUrlError('Invalid URL: only http and https are allowed')

    if not parts.hostname:
        raise InvalidUrlError('Invalid URL: missing host')

    netloc = _normalize_host(parts.hostname)
    if port is not None and port != DEFAULT_PORTS[scheme]:
        netloc = f'{netloc}:{port}'
    userinfo, at, _ = parts.netloc.rpartition('@')
    if at:
        netloc = f'{userinfo}@{netloc}'

    return urlunsplit((scheme, netloc, parts.path or '/', parts.query, parts.fragment))


def _is_container(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple))


def _empty_copy(value: Any):
    return {} if isinstance(value, Mapping) else []


def sanitize_deep(value: Any) -> Any:
    """
    Sanitize every string inside a nested structure.

    Dicts, lists and tuples are rebuilt with the same shape; strings go
    through ``sanitize_text``; every other value (numbers, booleans, None,
    dict keys) is kept as is. The input is never modified. The walk uses
    an explicit stack, so depth is limited only by the size of the input,
    and a container reached twice (shared or cyclic) is copied once.

    Args:
        value: A string, container, or scalar

    Returns:
        A sanitized copy of ``value``
    """
    if isinstance(value, str):
        return sanitize_text(value)
    if not _is_container(value):
        return value

    root = _empty_copy(value)
    copies = {id(value): root}
    pending = [(value, root)]
    # Tuples are built as lists and frozen at the end; placeholders are
    # kept in creation order with every (parent, key) slot that holds them.
    tuples = [root] if isinstance(value, tuple) else []
    slots = {id(root): []}

    while pending:
        source, target = pending.pop()
        items = source.items() if isinstance(source, Mapping) else enumerate(source)
        for key, item in items:
            if isinstance(item, str):
                clean = sanitize_text(item)
            elif _is_container(item):
                clean = copies.get(id(item))
                if clean is None:
                    clean = _empty_copy(item)
                    copies[id(item)] = clean
                    pending.append((item, clean))
                    if isinstance(item, tuple):
                        tuples.append(clean)
                        slots[id(clean)] = []
                if isinstance(item, tuple):
                    slots[id(clean)].append((target, key))
            else:
                clean = item

            if isinstance(target, dict):
                target[key] = clean
            else:
                target.append(clean)

    # Children were created after their parents, so freeze them first
    for placeholder in reversed(tuples):
        frozen = tuple(placeholder)
        for parent, key in slots[id(placeholder)]:
            parent[key] = frozen
        if placeholder is root:
            root = frozen

    return root
