"""Compiled-in settings for the RTF to HTML endpoint"""

from dataclasses import dataclass, field

ALLOWED_ORIGIN = "https://www.scroogexhtml.com"
MAX_ATTACHMENT_BYTES = 1024 * 1024  # 1024 KB
RTF_EXTENSION = ".rtf"

DEFAULT_CSS = """
body,p {
  margin: 0;
}
td {
  vertical-align: top;
  border: 1px solid #D3D3D3;
}
table {
  border-collapse: collapse;
}
"""


@dataclass(frozen=True)
class ConversionConfig:
    """Options applied to the converter output before it is serialized."""

    add_outer_html: bool = True

    # <head>
    meta_author: str = "RTF to HTML Converter - https://www.scroogexhtml.com"
    meta_description: str = "Conversion of '{filename}'"
    stylesheet_include: str = DEFAULT_CSS
    include_default_font_style: bool = True
    default_language: str = ""

    # character formatting
    convert_language: bool = True

    # paragraphs
    convert_indent: bool = True
    convert_paragraph_borders: bool = True

    # special elements
    convert_bookmarks: bool = True
    convert_empty_paragraphs: bool = True
    convert_footnotes: bool = True
    convert_hyperlinks: bool = True
    convert_pictures: bool = True
    convert_tables: bool = True


@dataclass(frozen=True)
class HandlerSettings:
    allowed_origin: str = ALLOWED_ORIGIN
    max_attachment_bytes: int = MAX_ATTACHMENT_BYTES
    file_extension: str = RTF_EXTENSION
    add_footer: bool = True
    conversion: ConversionConfig = field(default_factory=ConversionConfig)
