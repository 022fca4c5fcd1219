"""RTF to HTML conversion service"""

from dataclasses import replace
from typing import Iterable

from bs4 import BeautifulSoup

from config import ConversionConfig
from services.html_service import PostProcessor, apply_conversion_options, run_post_processors
from services.libreoffice_service import convert_with_libreoffice

# Writer HTML export with pictures inlined as data: URIs
HTML_EXPORT_FILTER = "html:HTML (StarWriter):EmbedImages"


def build_conversion_config(base: ConversionConfig, filename: str) -> ConversionConfig:
    """Return a fresh config for one request, with the filename filled in."""
    return replace(base, meta_description=base.meta_description.format(filename=filename))


def convert_rtf_to_html(
    rtf_content: bytes,
    filename: str,
    config: ConversionConfig,
    post_processors: Iterable[PostProcessor] = (),
) -> str:
    """
    Convert an RTF document to HTML

    Args:
        rtf_content: RTF file as bytes
        filename: Original filename of the upload
        config: Conversion configuration for this request
        post_processors: Hooks run once each, in order, on the converted
            document before it is serialized

    Returns:
        HTML text
    """
    html_bytes = convert_with_libreoffice(
        rtf_content,
        source_extension="rtf",
        target_format=HTML_EXPORT_FILTER,
        output_extension="html",
    )

    document = BeautifulSoup(html_bytes, "html.parser")
    apply_conversion_options(document, config)
    document = run_post_processors(document, post_processors)

    if config.add_outer_html:
        return str(document)
    body = document.body
    return body.decode_contents() if body is not None else document.decode_contents()
