import pytest

from solsign.config.settings import Settings
from solsign.pdf.factory import PdfExtractorFactory
from solsign.pdf.pdfplumber_adapter import PdfPlumberAdapter
from solsign.pdf.pymupdf_adapter import PyMuPdfAdapter


class TestPdfExtractorFactory:
    @pytest.mark.parametrize(
        ("engine", "expected"),
        [
            ("pdfplumber", PdfPlumberAdapter),
            ("pymupdf", PyMuPdfAdapter),
            ("PdfPlumber", PdfPlumberAdapter),
            ("PyMuPDF", PyMuPdfAdapter),
        ],
    )
    def test_creates_configured_adapter(self, engine: str, expected: type) -> None:
        adapter = PdfExtractorFactory.create(Settings(pdf_engine=engine))
        assert isinstance(adapter, expected)

    def test_raises_for_unknown_engine(self) -> None:
        with pytest.raises(ValueError, match="Unknown PDF engine"):
            PdfExtractorFactory.create(Settings(pdf_engine="unknown"))
