from abc import ABC, abstractmethod


class BasePdfExtractor(ABC):
    """Contract for all PDF text extraction adapters."""

    @abstractmethod
    def extract_pages(self, pdf_bytes: bytes) -> list[str]:
        """Extract plain text per page.

        Args:
            pdf_bytes: Raw PDF file content.

        Returns:
            One string per page, in page order.

        Raises:
            PdfExtractionError: if extraction fails for any reason.
        """
