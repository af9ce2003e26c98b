import pathlib
import sys
import zlib

import pytest
import zstandard

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from poe_build_analyzer.errors import CorruptData, MalformedInput, UnsupportedCompression
from poe_build_analyzer.pob import base64url
from poe_build_analyzer.pob.compression import compress, decompress, inflate

XML = '<PathOfBuilding><Build level="1" className="Scion"/></PathOfBuilding>'


def test_encode_uses_url_safe_alphabet() -> None:
    data = bytes([0xFB, 0xFF, 0xFE])

    assert base64url.encode(data) == "-__-"
    assert base64url.decode("-__-") == data


@pytest.mark.parametrize("data", [b"a", b"ab", b"abc", bytes(range(256))])
def test_decode_inverts_encode(data: bytes) -> None:
    encoded = base64url.encode(data)

    assert base64url.decode(encoded) == data
    assert base64url.decode(encoded.rstrip("=")) == data


@pytest.mark.parametrize("code", ["", "   ", "a", "ab=c", "YQ=", "YWJj====", "YW*j", "YWJj\nZGVm", "QR", "QR=="])
def test_decode_rejects_malformed_codes(code: str) -> None:
    with pytest.raises(MalformedInput):
        base64url.decode(code)


def test_decode_trims_surrounding_whitespace() -> None:
    assert base64url.decode("\n  YWJj  \t") == b"abc"


@pytest.mark.parametrize("algorithm", ["zlib", "zstd"])
def test_compress_round_trips_text(algorithm: str) -> None:
    text = XML + "é€"

    assert decompress(compress(text, algorithm)) == text


def test_compress_emits_expected_headers() -> None:
    assert compress(XML, "zlib")[:1] == b"\x78"
    assert compress(XML, "zstd")[:4] == b"\x28\xb5\x2f\xfd"


def test_zstd_frame_without_content_size_is_accepted() -> None:
    compressor = zstandard.ZstdCompressor(write_content_size=False)
    frame = compressor.compress(XML.encode("utf-8"))

    assert decompress(frame) == XML


def test_damaged_zlib_checksum_is_corrupt() -> None:
    compressed = bytearray(zlib.compress(XML.encode("utf-8")))
    compressed[-1] ^= 0xFF

    with pytest.raises(CorruptData):
        decompress(bytes(compressed))


def test_truncated_zstd_frame_is_unsupported() -> None:
    frame = zstandard.ZstdCompressor().compress(XML.encode("utf-8") * 20)

    with pytest.raises(UnsupportedCompression) as excinfo:
        decompress(frame[:-6])

    assert len(excinfo.value.causes) == 2


def test_output_larger_than_limit_is_corrupt() -> None:
    with pytest.raises(CorruptData):
        decompress(compress(XML * 50, "zlib"), max_size=64)


def test_non_utf8_payload_is_corrupt() -> None:
    with pytest.raises(CorruptData):
        decompress(zlib.compress(b"\xff\xfe<Build/>"))


def test_canonical_codes_survive_re_encoding() -> None:
    assert base64url.decode("QQ") == b"A"
    assert base64url.encode(base64url.decode("QQ==")) == "QQ=="


@pytest.mark.parametrize("content_size", [True, False])
def test_oversized_zstd_frame_is_corrupt(content_size: bool) -> None:
    frame = zstandard.ZstdCompressor(write_content_size=content_size).compress(b"a" * 1000)

    with pytest.raises(CorruptData):
        decompress(frame, max_size=64)


@pytest.mark.parametrize("data", [b"", b"(", b"\x78"])
def test_payload_shorter_than_a_header_is_unsupported(data: bytes) -> None:
    with pytest.raises(UnsupportedCompression):
        decompress(data)


def test_inflate_returns_raw_bytes() -> None:
    assert inflate(compress(XML, "zstd")) == XML.encode("utf-8")
