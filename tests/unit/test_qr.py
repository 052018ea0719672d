import base64
import io

import pytest
from PIL import Image

from solsign.pdf.exceptions import InvalidDataUrlError, QrCodeError
from solsign.pdf.qr import decode_data_url, generate_qr_png, is_supported_image


class TestGenerateQrPng:
    def test_returns_square_png(self) -> None:
        data = generate_qr_png("https://explorer.solana.com/tx/abc?cluster=devnet")

        assert is_supported_image(data)
        image = Image.open(io.BytesIO(data))
        assert image.format == "PNG"
        assert image.size == (300, 300)

    def test_custom_size(self) -> None:
        image = Image.open(io.BytesIO(generate_qr_png("hash", size=64)))
        assert image.size == (128, 128)

    def test_empty_payload(self) -> None:
        with pytest.raises(QrCodeError, match="empty"):
            generate_qr_png("")

    def test_payload_too_large(self) -> None:
        with pytest.raises(QrCodeError):
            generate_qr_png("x" * 5000)


class TestDecodeDataUrl:
    def test_decodes_base64_png(self, signature_png: bytes) -> None:
        url = "data:image/png;base64," + base64.b64encode(signature_png).decode()
        assert decode_data_url(url) == signature_png

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "no comma here",
            "data:image/png,plain-not-base64",
            "http://example.com/x.png,abc",
            "data:image/png;base64,@@not base64@@",
        ],
    )
    def test_rejects_invalid(self, value: str | None) -> None:
        with pytest.raises(InvalidDataUrlError):
            decode_data_url(value)


class TestIsSupportedImage:
    def test_jpeg(self) -> None:
        buf = io.BytesIO()
        Image.new("RGB", (4, 4)).save(buf, format="JPEG")
        assert is_supported_image(buf.getvalue())

    def test_rejects_other_bytes(self) -> None:
        assert not is_supported_image(b"GIF89a....")
