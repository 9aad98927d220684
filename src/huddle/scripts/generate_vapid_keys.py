# src/huddle/scripts/generate_vapid_keys.py
"""
Generate a VAPID key pair for Web Push.

Prints ``VAPID_PUBLIC_KEY`` / ``VAPID_PRIVATE_KEY`` lines ready to paste into
``.env``. The public key is the uncompressed P-256 point and the private key
the raw 32-byte scalar, both base64url-encoded without padding, which is what
browsers and pywebpush expect.
"""

import argparse
import base64

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ec

PRIVATE_KEY_BYTES = 32


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode().rstrip("=")


def generate_vapid_keys() -> tuple[str, str]:
    """Return a new (public_key, private_key) pair, base64url-encoded."""
    private_key = ec.generate_private_key(ec.SECP256R1())
    public_bytes = private_key.public_key().public_bytes(
        encoding=serialization.Encoding.X962,
        format=serialization.PublicFormat.UncompressedPoint,
    )
    private_bytes = private_key.private_numbers().private_value.to_bytes(
        PRIVATE_KEY_BYTES, "big"
    )
    return _b64url(public_bytes), _b64url(private_bytes)


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate VAPID keys for Web Push")
    parser.add_argument(
        "--contact",
        default="mailto:admin@example.com",
        help="Contact URI for VAPID_CONTACT_EMAIL",
    )
    args = parser.parse_args()

    public_key, private_key = generate_vapid_keys()
    print("Add these to your .env file:\n")
    print(f"VAPID_PUBLIC_KEY={public_key}")
    print(f"VAPID_PRIVATE_KEY={private_key}")
    print(f"VAPID_CONTACT_EMAIL={args.contact}")


if __name__ == "__main__":
    main()
