"""Crypto functions for key chains and authentication tags."""
import nacl.bindings
import nacl.encoding
import nacl.hash
import nacl.pwhash
import nacl.utils

# ===== Constants =====

KEY_SIZE = 16  # bytes (128 bits) for chain keys
SEED_SIZE = 32  # bytes (256 bits) for chain seeds
SALT_SIZE = nacl.pwhash.argon2id.SALTBYTES  # 16 bytes
MAX_DIGEST_SIZE = nacl.hash.BLAKE2B_BYTES_MAX  # 64 bytes
OPSLIMIT = nacl.pwhash.argon2id.OPSLIMIT_INTERACTIVE
MEMLIMIT = nacl.pwhash.argon2id.MEMLIMIT_INTERACTIVE

# ===== Crypto Primitives =====


def random_bytes(size: int = SEED_SIZE) -> bytes:
    """Generate `size` random bytes."""
    return nacl.utils.random(size)


def one_way(data: bytes, size: int = KEY_SIZE) -> bytes:
    """BLAKE2b hash. Default 16 bytes (128 bits) for chain keys."""
    return nacl.hash.blake2b(data, digest_size=size, encoder=nacl.encoding.RawEncoder)


def mac(key: bytes, message: bytes, input_digest_size: int, output_digest_size: int) -> bytes:
    """Keyed BLAKE2b over message, truncated to output_digest_size bytes.

    The full digest is input_digest_size bytes (max 64); truncation keeps
    the leading bytes so shorter tags are prefixes of longer ones.
    """
    if not 0 < output_digest_size <= input_digest_size <= MAX_DIGEST_SIZE:
        raise ValueError(
            f"invalid digest sizes: input={input_digest_size} output={output_digest_size}"
        )
    digest = nacl.hash.blake2b(
        message,
        digest_size=input_digest_size,
        key=key,
        encoder=nacl.encoding.RawEncoder
    )
    return digest[:output_digest_size]


def derive_from_passphrase(
    passphrase: bytes,
    salt: bytes,
    size: int = SEED_SIZE,
    opslimit: int = OPSLIMIT,
    memlimit: int = MEMLIMIT
) -> bytes:
    """Derive a secret from a passphrase with Argon2id.

    Salt must be exactly SALT_SIZE (16) bytes.
    """
    if len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be {SALT_SIZE} bytes, got {len(salt)}")
    return nacl.pwhash.argon2id.kdf(size, passphrase, salt, opslimit=opslimit, memlimit=memlimit)


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """Compare two byte strings in constant time (libsodium sodium_memcmp)."""
    return nacl.bindings.sodium_memcmp(a, b)
