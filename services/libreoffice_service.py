"""Headless LibreOffice conversion service"""

import logging
import os
import shutil
import subprocess
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

# Common paths for LibreOffice in Lambda layers
LAMBDA_PATHS = [
    '/opt/libreoffice/program/soffice.bin',
    '/opt/libreoffice7.4/program/soffice.bin',
    '/opt/libreoffice/instdir/program/soffice.bin',
    '/opt/bin/soffice',
    '/opt/lo/instdir/program/soffice.bin',
    '/opt/libreoffice7/program/soffice.bin',
]

MACOS_PATH = "/Applications/LibreOffice.app/Contents/MacOS/soffice"


class LibreOfficeNotFoundError(Exception):
    """No soffice executable could be located"""


class ConversionError(Exception):
    """LibreOffice ran but did not produce the expected output"""


def find_libreoffice(search_root: str = '/opt') -> str:
    """
    Find LibreOffice executable in local system or Lambda environment

    Args:
        search_root: Directory walked as a last resort (Lambda layers mount under /opt)

    Returns:
        str: Path to LibreOffice executable

    Raises:
        LibreOfficeNotFoundError: If LibreOffice is not found
    """
    # System PATH first, works for local dev and container images
    for name in ("soffice", "libreoffice"):
        local_path = shutil.which(name)
        if local_path:
            return local_path

    if os.path.exists(MACOS_PATH):
        return MACOS_PATH

    for path in LAMBDA_PATHS:
        if os.path.exists(path):
            return path

    if os.path.isdir(search_root):
        for root, _dirs, files in os.walk(search_root):
            if 'soffice.bin' in files:
                return os.path.join(root, 'soffice.bin')
            if 'soffice' in files:
                return os.path.join(root, 'soffice')

    raise LibreOfficeNotFoundError(
        f"LibreOffice not found in PATH or under {search_root}. "
        f"Install it locally or attach a layer that exposes 'soffice(.bin)'."
    )


def convert_with_libreoffice(
    content: bytes,
    source_extension: str,
    target_format: str,
    output_extension: str,
    timeout: int = 120,
) -> bytes:
    """
    Convert a document with LibreOffice and return the output file

    Args:
        content: Input document as bytes
        source_extension: Extension LibreOffice uses to detect the input format (e.g. "rtf")
        target_format: Value for --convert-to, including filter and options
        output_extension: Extension of the file LibreOffice writes (e.g. "html")
        timeout: Seconds before the subprocess is killed

    Returns:
        Output document as bytes

    Raises:
        ConversionError: If conversion fails
    """
    libreoffice_path = find_libreoffice()
    logger.info("Running LibreOffice", extra={"binary": libreoffice_path, "target": target_format})

    temp_dir = tempfile.mkdtemp()
    source_path = os.path.join(temp_dir, f'document.{source_extension}')
    output_path = os.path.join(temp_dir, f'document.{output_extension}')
    # Private LibreOffice profile per run, removed with the temp dir
    profile_arg = f"-env:UserInstallation={Path(temp_dir, 'profile').as_uri()}"

    try:
        with open(source_path, 'wb') as source_file:
            source_file.write(content)

        # Set HOME to a writable location to avoid first-run setup issues
        env = os.environ.copy()
        env.setdefault("HOME", "/tmp")
        result = subprocess.run(
            [
                libreoffice_path,
                '--headless', '--nologo', '--nodefault', '--invisible', '--nofirststartwizard',
                profile_arg,
                '--convert-to', target_format,
                '--outdir', temp_dir,
                source_path,
            ],
            capture_output=True,
            text=True,
            timeout=timeout,
            env=env,
        )

        if result.returncode != 0:
            logger.error(
                "LibreOffice conversion failed",
                extra={"returncode": result.returncode, "stderr": result.stderr},
            )
            raise ConversionError(f"LibreOffice conversion failed: {result.stderr}")

        # LibreOffice names the output after the input file
        if not os.path.exists(output_path):
            raise ConversionError(f"{output_extension.upper()} file was not created")

        with open(output_path, 'rb') as output_file:
            return output_file.read()

    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
