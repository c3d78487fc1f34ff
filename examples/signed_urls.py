#!/usr/bin/env python3
"""
Signed URL Example

This example demonstrates:
- Signing a download link in place of a placeholder
- Verifying the link on the way back in
- Detecting a tampered link
- Checking a token issued by the first release with the legacy scheme
"""

import re

from sha256_seal import InvalidArgumentError, Seal

SECRET = "download-link-secret"
PLACEHOLDER = "__SIGNATURE__"


def issue_link(user_id, document):
    """Return a signed download link for ``document``."""
    template = f"/users/{user_id}/documents/{document}?sig={PLACEHOLDER}"
    return Seal(template, SECRET, PLACEHOLDER).signed_value()


def check_link(link):
    """Return whether ``link`` carries a valid signature."""
    match = re.search(r"sig=([A-Za-z0-9_-]+)$", link)
    if match is None:
        return False
    try:
        return Seal(link, SECRET, match.group(1)).is_signed()
    except InvalidArgumentError as exc:
        print(f"Rejected {link!r}: {exc}")
        return False


def demonstrate_signed_links():
    """Issue, verify, and tamper with a few links."""
    print("Signed Link Example")
    print("=" * 40)

    links = [issue_link(user_id, "report.pdf") for user_id in (7, 42, 1001)]
    for link in links:
        status = "valid" if check_link(link) else "invalid"
        print(f"{link} -> {status}")

    print("Tampering with the first link...")
    tampered = links[0].replace("/users/7/", "/users/8/")
    status = "valid" if check_link(tampered) else "invalid"
    print(f"{tampered} -> {status}")


def demonstrate_legacy_tokens():
    """Verify a token issued by the first release."""
    print("Legacy token check")
    print("=" * 40)

    link = "/~bob/.8aa1d38b5c16d077d5ac1360c8a6f0248419ff5a3e6dca28a3233894ddcdf3c4/documents/"
    token = "8aa1d38b5c16d077d5ac1360c8a6f0248419ff5a3e6dca28a3233894ddcdf3c4"
    seal = Seal(link, "secret", token, scheme="legacy-sha256")
    print(f"{link} -> {'valid' if seal.is_signed() else 'invalid'}")


if __name__ == "__main__":
    demonstrate_signed_links()
    print()
    demonstrate_legacy_tokens()
