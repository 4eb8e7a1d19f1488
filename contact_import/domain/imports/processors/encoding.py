import logging

logger = logging.getLogger(__name__)

# Exports from spreadsheet tools are UTF-8 (often with a BOM) or Windows-1252.
TEXT_ENCODINGS = ("utf-8-sig", "cp1252")


def decode_text(content: bytes) -> str:
    """Decode bytes trying UTF-8 (with or without BOM) before the Windows encodings."""
    for encoding in TEXT_ENCODINGS:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            logger.debug(f"Content is not valid {encoding}, trying next encoding")
    # latin-1 maps every byte
    return content.decode("latin-1")
