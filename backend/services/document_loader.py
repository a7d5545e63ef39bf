"""Document text extraction for uploaded files."""
import io
import logging
import fitz  # PyMuPDF
from docx import Document as DocxDocument

from models.document import Document
from services.errors import CollaboratorError, CollaboratorFailure

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"


class DocumentExtractionError(CollaboratorError):
    """A file could not be turned into text."""


class DocumentLoader:
    """Extracts plain text from PDF, Word and text uploads."""

    def extract(self, file_bytes: bytes, mime_type: str, filename: str = "") -> Document:
        """
        Extract text from an uploaded file.

        PDFs go through PyMuPDF, anything with "word" in its MIME type through
        python-docx, and everything else is decoded as UTF-8.

        Args:
            file_bytes: Raw file content
            mime_type: MIME type reported by the client
            filename: Original filename, for logging and reporting

        Returns:
            Document with the extracted text

        Raises:
            DocumentExtractionError: If the file cannot be parsed
        """
        mime_type = mime_type or ""
        try:
            if mime_type == PDF_MIME_TYPE:
                text = self._extract_pdf(file_bytes)
            elif "word" in mime_type:
                text = self._extract_docx(file_bytes)
            else:
                text = file_bytes.decode("utf-8", errors="replace")
        except Exception as e:
            logger.error(f"Failed to extract text from {filename or 'upload'}: {str(e)}", exc_info=True)
            raise DocumentExtractionError(CollaboratorFailure(
                code="EXTRACTION_ERROR",
                message=f"Could not extract text from {filename or 'upload'}: {str(e)}",
                details={"filename": filename, "mime_type": mime_type}
            ))

        logger.info(f"Extracted {len(text)} characters from {filename or 'upload'} ({mime_type})")
        return Document(filename=filename, mime_type=mime_type, size=len(file_bytes), text=text)

    def _extract_pdf(self, file_bytes: bytes) -> str:
        pdf_document = fitz.open(stream=file_bytes, filetype="pdf")
        try:
            return "".join(page.get_text() for page in pdf_document)
        finally:
            pdf_document.close()

    def _extract_docx(self, file_bytes: bytes) -> str:
        document = DocxDocument(io.BytesIO(file_bytes))
        return "\n".join(paragraph.text for paragraph in document.paragraphs)
