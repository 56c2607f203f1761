"""Content identifiers and the recovery of CIDs from block-store file names."""

import base64
import binascii
import os
import re
from dataclasses import dataclass

DAG_PB = 0x70
DAG_CBOR = 0x71
SHA2_256 = 0x12

_BASE58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_BASE58_INDEX = {char: position for position, char in enumerate(_BASE58_ALPHABET)}
_HEX = re.compile(r"(?:[0-9a-fA-F]{2})*")


def _varint_encode(value):
    if value < 0:
        raise ValueError(f"varint cannot encode negative value {value}")
    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def _varint_decode(data, offset=0):
    """Return (value, next offset) of the varint starting at offset."""
    value = 0
    shift = 0
    for position in range(offset, min(len(data), offset + 10)):
        byte = data[position]
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            return value, position + 1
        shift += 7
    raise ValueError("varint is truncated or too long")


def _base58_encode(data):
    number = int.from_bytes(data, "big")
    chars = []
    while number:
        number, remainder = divmod(number, 58)
        chars.append(_BASE58_ALPHABET[remainder])
    leading = len(data) - len(data.lstrip(b"\x00"))
    return "1" * leading + "".join(reversed(chars))


def _base58_decode(text):
    number = 0
    for char in text:
        try:
            number = number * 58 + _BASE58_INDEX[char]
        except KeyError:
            raise ValueError(f"invalid base58 character {char!r}") from None
    body = number.to_bytes((number.bit_length() + 7) // 8, "big") if number else b""
    leading = len(text) - len(text.lstrip("1"))
    return b"\x00" * leading + body


def _pad(text, block):
    return text + "=" * (-len(text) % block)


def _base32_encode_lower(data):
    return base64.b32encode(data).decode("ascii").rstrip("=").lower()


def _multibase_decode(text):
    """Return (prefix, bytes) of a multibase-encoded string."""
    if not text:
        raise ValueError("cannot decode multibase for zero length string")
    prefix, body = text[0], text[1:]
    try:
        if prefix in ("f", "F"):
            if not _HEX.fullmatch(body):
                raise ValueError("invalid hex data")
            return prefix, bytes.fromhex(body)
        if prefix in ("b", "c"):
            if body != body.lower():
                raise ValueError("invalid base32 data")
            return prefix, base64.b32decode(_pad(body.upper(), 8))
        if prefix in ("B", "C"):
            if body != body.upper():
                raise ValueError("invalid base32 data")
            return prefix, base64.b32decode(_pad(body, 8))
        if prefix == "z":
            return prefix, _base58_decode(body)
        if prefix in ("m", "M"):
            return prefix, base64.b64decode(_pad(body, 4), validate=True)
        if prefix in ("u", "U"):
            if not re.fullmatch(r"[A-Za-z0-9_\-]*=*", body):
                raise ValueError("invalid base64url data")
            return prefix, base64.urlsafe_b64decode(_pad(body, 4))
    except binascii.Error as exc:
        raise ValueError(f"invalid multibase data: {exc}") from None
    raise ValueError(f"selected encoding not supported: {prefix!r}")


def multihash_encode(digest, code):
    """Return the multihash of a digest under the given hash function code."""
    digest = bytes(digest)
    return _varint_encode(int(code)) + _varint_encode(len(digest)) + digest


def _check_multihash(data):
    code, offset = _varint_decode(data)
    length, offset = _varint_decode(data, offset)
    if len(data) - offset != length:
        raise ValueError("multihash length does not match its digest")
    return code


@dataclass(frozen=True)
class Cid:
    """A content identifier: version, content codec and multihash bytes."""

    version: int
    codec: int
    multihash: bytes

    def __post_init__(self):
        if self.version not in (0, 1):
            raise ValueError(f"unsupported cid version {self.version}")
        if self.version == 0 and self.codec != DAG_PB:
            raise ValueError("cid version 0 only supports dag-pb")
        object.__setattr__(self, "multihash", bytes(self.multihash))
        _check_multihash(self.multihash)

    @property
    def hash_code(self):
        """Code of the hash function in the multihash."""
        return _varint_decode(self.multihash)[0]

    @property
    def digest(self):
        """Raw digest carried by the multihash."""
        _, offset = _varint_decode(self.multihash)
        _, offset = _varint_decode(self.multihash, offset)
        return self.multihash[offset:]

    def to_bytes(self):
        """Return the binary form of the CID."""
        if self.version == 0:
            return self.multihash
        return (
            _varint_encode(self.version) + _varint_encode(self.codec) + self.multihash
        )

    def encode(self):
        """Return the text form: base58btc for v0, lower-case base32 for v1."""
        if self.version == 0:
            return _base58_encode(self.multihash)
        return "b" + _base32_encode_lower(self.to_bytes())

    def __str__(self):
        return self.encode()

    @classmethod
    def from_bytes(cls, data):
        """Parse the binary form of a CID."""
        data = bytes(data)
        if len(data) == 34 and data[0] == SHA2_256 and data[1] == 32:
            return cls(0, DAG_PB, data)
        version, offset = _varint_decode(data)
        if version != 1:
            raise ValueError(f"invalid cid version {version}")
        codec, offset = _varint_decode(data, offset)
        return cls(version, codec, data[offset:])

    @classmethod
    def decode(cls, text):
        """Parse the text form of a CID."""
        if len(text) == 46 and text.startswith("Qm"):
            return cls(0, DAG_PB, _base58_decode(text))
        _, data = _multibase_decode(text)
        return cls.from_bytes(data)


def hex_string_to_cid(hex_digest):
    """Build a dag-cbor CIDv1 from hex of <hash code><length><digest>."""
    if not _HEX.fullmatch(hex_digest):
        raise ValueError(f"error decoding hex digest: invalid hex {hex_digest!r}")
    data = bytes.fromhex(hex_digest)
    if len(data) < 2:
        raise ValueError("error constructing multihash: digest is too short")
    return Cid(1, DAG_CBOR, multihash_encode(data[2:], data[0]))


def find_digest_hex_from_base32_multibase(text):
    """Decode a multibase string and return its bytes as hex."""
    try:
        _, data = _multibase_decode(text)
    except ValueError as exc:
        raise ValueError(f"error decoding multibase: {exc}") from exc
    return data.hex()


def find_cid_from_digest(text):
    """Return the dag-cbor CIDv1 for a multibase-encoded multihash."""
    try:
        hex_str = find_digest_hex_from_base32_multibase(text)
    except ValueError as exc:
        raise ValueError(f"error finding hex value: {exc}") from exc
    try:
        return hex_string_to_cid(hex_str)
    except ValueError as exc:
        raise ValueError(f"error finding cid value from hex: {exc}") from exc


def cid_from_block_filename(filename):
    """Return the CID of a block stored under a base32 file name."""
    base = os.path.basename(filename)
    stem, _ = os.path.splitext(base)
    return find_cid_from_digest("B" + stem.upper())