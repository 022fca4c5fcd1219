"""Google Cloud Functions entry point for the RTF to HTML endpoint"""

import functions_framework

from app import app
from utils.logging_setup import configure_logging

configure_logging()


@functions_framework.http
def rtf_to_html(request):
    """Dispatch the Cloud Functions request through the Flask app."""
    with app.request_context(request.environ):
        return app.full_dispatch_request()
