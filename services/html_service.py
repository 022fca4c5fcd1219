"""Options and post-processing hooks applied to the converted HTML document"""

import re
from typing import Callable, Iterable, Tuple

from bs4 import BeautifulSoup, Tag

from config import ConversionConfig

PostProcessor = Callable[[BeautifulSoup], BeautifulSoup]

INDENT_PROPERTIES = ("margin-left", "margin-right", "text-indent")
BORDER_PROPERTIES = ("border", "padding")
BLOCK_TAGS = ["p", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote", "div"]
TABLE_TAGS = ["table", "thead", "tbody", "tfoot", "tr", "td", "th", "caption"]

# LibreOffice marks footnote/endnote anchors with these classes and puts
# the note bodies in <div id="sdfootnote1">, <div id="sdendnote1">, ...
NOTE_ANCHOR_CLASSES = ("sdfootnoteanc", "sdfootnotesym", "sdendnoteanc", "sdendnotesym")
NOTE_BODY_ID = re.compile(r"^sd(foot|end)note\d+$")

# Stamped with the conversion time
VOLATILE_META = ("created", "changed")


def apply_conversion_options(document: BeautifulSoup, config: ConversionConfig) -> BeautifulSoup:
    """
    Apply the conversion flags to a parsed converter output in place

    Args:
        document: Converter output parsed with BeautifulSoup
        config: Per-request conversion configuration

    Returns:
        The same document, for chaining
    """
    for name in VOLATILE_META:
        for meta in document.find_all("meta", attrs={"name": _ci(name)}):
            meta.decompose()

    if not config.convert_footnotes:
        _remove_notes(document)
    if not config.convert_hyperlinks:
        for anchor in document.find_all("a", href=True):
            if not _is_note_anchor(anchor):
                anchor.unwrap()
    if not config.convert_bookmarks:
        for anchor in document.find_all("a"):
            if not anchor.has_attr("href") and (anchor.has_attr("name") or anchor.has_attr("id")):
                anchor.unwrap()
    if not config.convert_pictures:
        for img in document.find_all("img"):
            img.decompose()
    if not config.convert_tables:
        _flatten_tables(document)
    if not config.convert_indent:
        for tag in document.find_all(BLOCK_TAGS, style=True):
            _strip_style_properties(tag, INDENT_PROPERTIES)
    if not config.convert_paragraph_borders:
        for tag in document.find_all("p", style=True):
            _strip_style_properties(tag, BORDER_PROPERTIES)
    if not config.convert_language and document.body is not None:
        for tag in [document.body] + document.body.find_all(lang=True):
            if tag.has_attr("lang"):
                del tag["lang"]
    if not config.convert_empty_paragraphs:
        for paragraph in document.find_all("p"):
            if not paragraph.get_text(strip=True) and paragraph.find("img") is None:
                paragraph.decompose()

    _apply_head_options(document, config)
    return document


def footer_hook(filename: str, size: int) -> PostProcessor:
    """Build a hook that appends a <footer> naming the source file and its size."""
    text = f"Converted from: {filename} (size: {size // 1024} KB)"

    def append_footer(document: BeautifulSoup) -> BeautifulSoup:
        footer = document.new_tag("footer")
        footer.string = text
        _ensure_body(document).append(footer)
        return document

    return append_footer


def run_post_processors(document: BeautifulSoup, hooks: Iterable[PostProcessor]) -> BeautifulSoup:
    for hook in hooks:
        document = hook(document)
    return document


def _apply_head_options(document: BeautifulSoup, config: ConversionConfig) -> None:
    head = _ensure_head(document)

    if config.meta_author:
        _set_meta(document, head, "author", config.meta_author)
    if config.meta_description:
        _set_meta(document, head, "description", config.meta_description)

    if not config.include_default_font_style:
        for style in head.find_all("style"):
            style.decompose()
    if config.stylesheet_include:
        style = document.new_tag("style", attrs={"type": "text/css"})
        style.string = config.stylesheet_include
        head.append(style)

    if config.default_language and document.html is not None:
        document.html["lang"] = config.default_language


def _ci(name: str):
    return re.compile(f"^{re.escape(name)}$", re.IGNORECASE)


def _set_meta(document: BeautifulSoup, head: Tag, name: str, content: str) -> None:
    meta = head.find("meta", attrs={"name": _ci(name)})
    if meta is None:
        meta = document.new_tag("meta", attrs={"name": name})
        head.append(meta)
    meta["content"] = content


def _ensure_head(document: BeautifulSoup) -> Tag:
    head = document.head
    if head is None:
        head = document.new_tag("head")
        (document.html or document).insert(0, head)
    return head


def _ensure_body(document: BeautifulSoup) -> Tag:
    body = document.body
    if body is None:
        body = document.new_tag("body")
        (document.html or document).append(body)
    return body


def _is_note_anchor(anchor: Tag) -> bool:
    return any(cls in NOTE_ANCHOR_CLASSES for cls in anchor.get("class", []))


def _remove_notes(document: BeautifulSoup) -> None:
    for anchor in document.find_all("a"):
        if _is_note_anchor(anchor):
            anchor.decompose()
    for div in document.find_all("div", id=NOTE_BODY_ID):
        div.decompose()


def _flatten_tables(document: BeautifulSoup) -> None:
    for tag in document.find_all(["col", "colgroup"]):
        tag.decompose()
    for tag in document.find_all(TABLE_TAGS):
        tag.unwrap()


def _strip_style_properties(tag: Tag, prefixes: Tuple[str, ...]) -> None:
    declarations = [part.strip() for part in tag["style"].split(";")]
    kept = [
        declaration for declaration in declarations
        if declaration and not declaration.split(":", 1)[0].strip().lower().startswith(prefixes)
    ]
    if kept:
        tag["style"] = "; ".join(kept)
    else:
        del tag["style"]
