from flask import jsonify
from werkzeug.exceptions import HTTPException
from storefront.domain.exceptions import ValidationError, NotFound, SectionNotPublic


def _error_response(error, status_code, **extra):
    response = jsonify({
        "error": type(error).__name__,
        "message": str(error),
        **extra,
    })
    response.status_code = status_code
    return response


def register_error_handlers(app):
    @app.errorhandler(ValidationError)
    def handle_validation_error(error):
        return _error_response(error, 400, details=error.details)

    @app.errorhandler(NotFound)
    def handle_not_found(error):
        return _error_response(error, 404)

    @app.errorhandler(SectionNotPublic)
    def handle_section_not_public(error):
        return _error_response(error, 403)

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        response = jsonify({
            "error": error.name,
            "message": error.description,
        })
        response.status_code = error.code
        return response
