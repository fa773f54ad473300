# Converts uploaded files (images, PDFs, text) into multimodal content parts
# aceai/services/content_normalizer.py
import asyncio
import base64
import binascii
from typing import Iterable, List

import fitz  # PyMuPDF

from aceai.models.content import ContentPart, UploadedFile
from aceai.utils.config import settings
from aceai.utils.logger import logger

PDF_MEDIA_TYPE = "application/pdf"


def decode_transport(data: str) -> bytes:
    """Decodes the base64 transport encoding; accepts data URLs as well."""
    if data.startswith("data:") and "," in data:
        data = data.split(",", 1)[1]
    return base64.b64decode(data, validate=True)


def _rasterize_pdf(raw: bytes, max_pages: int, scale: float) -> List[bytes]:
    """Renders up to `max_pages` pages to PNG. Returns [] if the document cannot be rendered."""
    images: List[bytes] = []
    try:
        with fitz.open(stream=raw, filetype="pdf") as doc:
            logger.debug(f"PDF loaded for rendering. Pages: {doc.page_count}")
            matrix = fitz.Matrix(scale, scale)
            for index in range(min(doc.page_count, max_pages)):
                pixmap = doc.load_page(index).get_pixmap(matrix=matrix)
                images.append(pixmap.tobytes("png"))
    except Exception as e:
        logger.warning(f"PDF page rendering failed: {e}")
        return []
    return images


def _extract_pdf_text(raw: bytes) -> str:
    """Per-page text extraction, page-delimited. Returns '' if nothing could be read."""
    try:
        with fitz.open(stream=raw, filetype="pdf") as doc:
            page_texts = [page.get_text().strip() for page in doc]
    except Exception as e:
        logger.warning(f"PDF text extraction failed: {e}")
        return ""
    if not any(page_texts):
        return ""
    return "".join(f"Page {index}:\n{text}\n\n" for index, text in enumerate(page_texts, start=1))


async def _normalize_pdf(file: UploadedFile, raw: bytes) -> List[ContentPart]:
    images = await asyncio.to_thread(_rasterize_pdf, raw, settings.max_pdf_pages, settings.pdf_render_scale)
    if images:
        logger.info(f"Converted {len(images)} page(s) of '{file.name}' to images.")
        parts: List[ContentPart] = []
        for page_number, png in enumerate(images, start=1):
            parts.append(ContentPart.image("image/png", base64.b64encode(png).decode("ascii")))
            parts.append(ContentPart.text(f"PDF Page {page_number} of {file.name}"))
        return parts

    text = await asyncio.to_thread(_extract_pdf_text, raw)
    if text:
        return [ContentPart.text(f"PDF Material ({file.name}):\n{text}")]

    logger.warning(f"Failed to extract content from PDF: {file.name}")
    return []


async def normalize_file(file: UploadedFile) -> List[ContentPart]:
    try:
        raw = decode_transport(file.data)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Dropping '{file.name}': transport data is not valid base64 ({e})")
        return []

    media_type = file.media_type.lower()
    if media_type.startswith("image/"):
        if not raw:
            logger.warning(f"Dropping empty image '{file.name}'")
            return []
        return [ContentPart.image(media_type, base64.b64encode(raw).decode("ascii"))]

    if media_type == PDF_MEDIA_TYPE:
        return await _normalize_pdf(file, raw)

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        logger.warning(f"Dropping '{file.name}': content is not UTF-8 text ({e})")
        return []
    if not text.strip():
        logger.warning(f"Dropping '{file.name}': no text content")
        return []
    return [ContentPart.text(f"Material ({file.name}):\n{text}")]


async def normalize_files(files: Iterable[UploadedFile]) -> List[ContentPart]:
    """
    Normalizes every file in order. A file that cannot be processed contributes
    nothing; it never stops the remaining files from being processed.
    """
    parts: List[ContentPart] = []
    for file in files:
        try:
            parts.extend(await normalize_file(file))
        except Exception as e:
            logger.exception(f"Unexpected error normalizing '{file.name}': {e}")
    return parts
