"""Flask endpoint converting uploaded RTF documents to HTML"""

import logging
import uuid
from typing import Optional

from flask import Flask, Response, g, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException, MethodNotAllowed

from config import HandlerSettings
from services.html_service import footer_hook
from services.rtf_service import build_conversion_config, convert_rtf_to_html
from utils.validators import (
    extract_attachment,
    parse_multipart_boundary,
    validate_attachment_size,
    validate_method,
    validate_origin,
)

logger = logging.getLogger(__name__)

ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(settings: Optional[HandlerSettings] = None) -> Flask:
    settings = settings or HandlerSettings()

    app = Flask(__name__)
    app.config["HANDLER_SETTINGS"] = settings
    CORS(app, origins=[settings.allowed_origin], methods=["POST"])

    @app.before_request
    def assign_request_id():
        g.request_id = request.headers.get("X-Request-Id") or uuid.uuid4().hex

    # All methods reach the view, the method gate runs first
    @app.route('/', methods=ALL_METHODS, provide_automatic_options=False)
    def rtf_to_html():
        """
        Convert an uploaded RTF file to HTML

        Request: multipart/form-data, the first part whose filename ends
            with ".rtf" is converted
        Response: text/html document
        """
        try:
            validate_method(request.method)
            validate_origin(
                request.headers.get("Origin"),
                request.headers.get("Referer"),
                settings.allowed_origin,
            )
            boundary = parse_multipart_boundary(request.headers.get("Content-Type"))
            attachment = extract_attachment(
                request.get_data(), boundary, settings.file_extension
            )
            validate_attachment_size(attachment, settings.max_attachment_bytes)
        except HTTPException as e:
            return _reject(e)

        config = build_conversion_config(settings.conversion, attachment.filename)
        hooks = [footer_hook(attachment.filename, attachment.size)] if settings.add_footer else []
        html = convert_rtf_to_html(attachment.content, attachment.filename, config, hooks)

        logger.info(
            "Converted %s",
            attachment.filename,
            extra={"size": attachment.size, "html_length": len(html)},
        )
        response = Response(html, status=200, content_type="text/html; charset=utf-8")
        response.headers["Access-Control-Allow-Origin"] = settings.allowed_origin
        return response

    # Methods the router rejects before the view runs
    @app.errorhandler(MethodNotAllowed)
    def method_not_allowed(error):
        return _reject(MethodNotAllowed(valid_methods=["POST"], description="Method Not Allowed"))

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Endpoint not found'}), 404

    @app.errorhandler(500)
    def internal_error(error):
        logger.error(
            "Conversion request failed",
            exc_info=getattr(error, "original_exception", None) or error,
        )
        return jsonify({'error': 'Internal server error'}), 500

    return app


def _reject(error: HTTPException) -> Response:
    """Bodiless response carrying the reason in the status line"""
    logger.info("Request rejected: %s", error.description, extra={"status": error.code})
    response = Response(status=f"{error.code} {error.description}")
    if isinstance(error, MethodNotAllowed) and error.valid_methods:
        response.headers["Allow"] = ", ".join(error.valid_methods)
    return response


app = create_app()


if __name__ == '__main__':
    from utils.logging_setup import configure_logging

    configure_logging()
    app.run(debug=True, host='0.0.0.0', port=5000)
