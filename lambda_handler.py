"""AWS Lambda handler for the RTF to HTML endpoint"""

import serverless_wsgi

from app import app
from utils.logging_setup import configure_logging

configure_logging()


def handler(event, context):
    """
    Handle HTTP events using serverless-wsgi adapter for Flask (WSGI)
    """
    return serverless_wsgi.handle_request(app, event, context)
