"""
Pwned Passwords range client.

Implements the k-anonymity password check: only the first 5 characters
of the SHA-1 hash are sent to the API and the suffix is matched locally
against the returned candidate list. The password and its full hash
never leave this system and are never logged.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import hashlib
import logging
import re
import ssl

import httpx

from propvault.config import DEFAULT_PWNED_ENDPOINT
from propvault.errors import MalformedIndexResponse, TransportUnavailable
from propvault.pwned.models import BreachVerdict, RangeEntry

logger = logging.getLogger(__name__)

PREFIX_LENGTH = 5
SHA1_HEX = re.compile(r"^[0-9A-Fa-f]{40}$")


def tls12_context() -> ssl.SSLContext:
    """Get a verifying SSL context that refuses anything below TLS 1.2."""
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return context


def split_hash(sha1_hex: str) -> tuple[str, str]:
    """Split an uppercase SHA-1 hex digest into (prefix, suffix)."""
    return sha1_hex[:PREFIX_LENGTH], sha1_hex[PREFIX_LENGTH:]


def parse_range_response(text: str) -> list[RangeEntry]:
    """Parse a range response body.

    Response format: "SUFFIX:COUNT\\r\\n" per line. Blank lines are skipped.

    Raises:
        MalformedIndexResponse: If a line is not SUFFIX:COUNT
    """
    entries = []
    for line_no, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue

        parts = line.split(":")
        if len(parts) != 2 or not parts[0].strip():
            raise MalformedIndexResponse(f"Line {line_no} is not SUFFIX:COUNT")

        hash_suffix, count = parts[0].strip(), parts[1].strip()
        if not (count.isascii() and count.isdigit()):
            raise MalformedIndexResponse(f"Line {line_no} has an invalid count")

        entries.append(RangeEntry(suffix=hash_suffix, count=int(count)))

    return entries


def find_suffix(entries: list[RangeEntry], suffix: str) -> RangeEntry | None:
    """Find the entry for a hash suffix. The first match wins."""
    suffix = suffix.upper()
    match = None
    for entry in entries:
        if entry.suffix.upper() == suffix:
            if match is None:
                match = entry
            else:
                logger.debug("Duplicate suffix in range response; keeping first")
    return match


class PwnedPasswordsClient:
    """Synchronous client for the Pwned Passwords range API."""

    def __init__(
        self,
        endpoint_base: str = DEFAULT_PWNED_ENDPOINT,
        timeout: float = 15.0,
        user_agent: str = "propvault/1.0",
        client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            endpoint_base: Range endpoint; the prefix is appended as a path segment
            timeout: Request timeout in seconds
            user_agent: User-Agent header for requests
            client: Preconfigured httpx client (the caller keeps ownership)
        """
        self.endpoint_base = endpoint_base.rstrip("/")
        self.user_agent = user_agent
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout, verify=tls12_context())

    def close(self) -> None:
        """Close HTTP session."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "PwnedPasswordsClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _fetch_range(self, prefix: str) -> str:
        url = f"{self.endpoint_base}/{prefix}"
        try:
            response = self._client.get(url, headers={"User-Agent": self.user_agent})
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise TransportUnavailable(
                f"Range request failed: HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise TransportUnavailable(f"Range request failed: {e}") from e
        return response.text

    def check(self, password: str) -> BreachVerdict:
        """Check if a password has been exposed in data breaches.

        Args:
            password: Password to check (NOT stored or logged)

        Returns:
            BreachVerdict with exposure count
        """
        password_hash = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()
        return self._check_digest(password_hash)

    def check_hash(self, sha1_hash: str) -> BreachVerdict:
        """Check a pre-computed SHA-1 hash.

        Args:
            sha1_hash: Full SHA-1 hex digest of the password

        Returns:
            BreachVerdict with exposure count
        """
        if not SHA1_HEX.match(sha1_hash.strip()):
            raise ValueError("Expected a 40 character SHA-1 hex digest")
        return self._check_digest(sha1_hash.strip().upper())

    def _check_digest(self, password_hash: str) -> BreachVerdict:
        prefix, suffix = split_hash(password_hash)
        logger.debug(f"Querying range {prefix}")

        entries = parse_range_response(self._fetch_range(prefix))
        match = find_suffix(entries, suffix)

        if match is None:
            return BreachVerdict.from_count(0, hash_prefix=prefix)
        return BreachVerdict.from_count(match.count, hash_prefix=prefix)


def check(
    password: str,
    endpoint_base: str = DEFAULT_PWNED_ENDPOINT,
    client: httpx.Client | None = None,
) -> BreachVerdict:
    """Check a password with a one-off client.

    Args:
        password: Password to check
        endpoint_base: Range endpoint
        client: Optional httpx client

    Returns:
        BreachVerdict
    """
    with PwnedPasswordsClient(endpoint_base=endpoint_base, client=client) as pwned:
        return pwned.check(password)
