from __future__ import annotations

from typing import Optional

import pytest

from app import create_app
from config import ALLOWED_ORIGIN

BOUNDARY = "----TestBoundary7MA4YWxkTrZu0gW"

SAMPLE_RTF = b"{\\rtf1\\ansi\\deff0 {\\fonttbl {\\f0 Times New Roman;}}\\f0\\fs24 Hello, world.\\par}"

# Shape of LibreOffice's "HTML (StarWriter)" export
SAMPLE_HTML = b"""<!DOCTYPE html PUBLIC "-//W3C//DTD HTML 4.0 Transitional//EN">
<html>
<head>
	<meta http-equiv="content-type" content="text/html; charset=utf-8"/>
	<title></title>
	<meta name="generator" content="LibreOffice 7.6.4.1 (Linux)"/>
	<meta name="created" content="2026-10-18T10:00:00.123456789"/>
	<meta name="changed" content="2026-10-18T10:00:01.987654321"/>
	<style type="text/css">
		@page { size: 8.5in 11in; margin: 0.79in }
		p { line-height: 115%; margin-bottom: 0.1in; background: transparent }
	</style>
</head>
<body lang="en-US" link="#000080" vlink="#800000" dir="ltr">
<p style="margin-left: 0.5in; text-indent: -0.25in; border: 1px solid #000000; padding: 0.02in">Indented paragraph</p>
<p><span lang="fr-FR">Bonjour</span></p>
<p><a name="intro"></a>Bookmarked text</p>
<p>See <a href="https://example.com/">the site</a><a class="sdfootnoteanc" name="sdfootnote1anc" href="#sdfootnote1sym"><sup>1</sup></a></p>
<p><br/></p>
<p><img src="data:image/png;base64,iVBORw0KGgo=" width="10" height="10"/></p>
<table width="100%" cellpadding="4" cellspacing="0">
	<col width="128*"/>
	<tr><td><p>Cell A</p></td><td><p>Cell B</p></td></tr>
</table>
<div id="sdfootnote1"><p class="sdfootnote"><a class="sdfootnotesym" name="sdfootnote1sym" href="#sdfootnote1anc">1</a>Footnote text</p></div>
</body>
</html>
"""


def build_multipart(parts, boundary: str = BOUNDARY) -> bytes:
    """Encode (name, filename, content) tuples as a multipart/form-data body, in order."""
    chunks = []
    for name, filename, content in parts:
        disposition = f'form-data; name="{name}"'
        if filename is not None:
            disposition += f'; filename="{filename}"'
        chunks.append(f"--{boundary}\r\n".encode())
        chunks.append(f"Content-Disposition: {disposition}\r\n".encode())
        if filename is not None:
            chunks.append(b"Content-Type: application/octet-stream\r\n")
        chunks.append(b"\r\n")
        chunks.append(content)
        chunks.append(b"\r\n")
    chunks.append(f"--{boundary}--\r\n".encode())
    return b"".join(chunks)


@pytest.fixture()
def multipart():
    return build_multipart


@pytest.fixture()
def fake_libreoffice(monkeypatch):
    """Replace the LibreOffice subprocess with a canned HTML export."""
    calls = []

    def fake_convert(content, source_extension, target_format, output_extension, timeout=120):
        calls.append(
            {
                "content": content,
                "source_extension": source_extension,
                "target_format": target_format,
                "output_extension": output_extension,
            }
        )
        return SAMPLE_HTML

    monkeypatch.setattr("services.rtf_service.convert_with_libreoffice", fake_convert)
    return calls


@pytest.fixture()
def app():
    flask_app = create_app()
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def post_upload(client, multipart):
    def _post(parts, origin: Optional[str] = ALLOWED_ORIGIN, headers: Optional[dict] = None):
        request_headers = {"Origin": origin} if origin else {}
        request_headers.update(headers or {})
        return client.post(
            "/",
            data=multipart(parts),
            content_type=f"multipart/form-data; boundary={BOUNDARY}",
            headers=request_headers,
        )

    return _post
