"""
Revision Compare Flask Routes
=============================
API endpoints for document comparison.

v1.0.0: Synchronous comparison, plain text comparison and background jobs
"""

import time
from functools import wraps
from typing import Optional
from flask import Blueprint, Flask, request, jsonify

from .config_logging import get_logger, RevisionCompareError, ValidationError
from .differ import DocumentDiffer, highlight_differences
from .jobs import get_job_manager

logger = get_logger('revision_compare.routes')

compare_blueprint = Blueprint('revision_compare', __name__)

SLOW_CALL_SECONDS = 5.0


# =============================================================================
# STANDARDIZED ERROR HANDLING DECORATOR
# =============================================================================

def handle_compare_errors(f):
    """
    Decorator for standardized API error handling in comparison routes.
    """
    @wraps(f)
    def decorated(*args, **kwargs):
        start_time = time.time()
        try:
            result = f(*args, **kwargs)

            elapsed = time.time() - start_time
            if elapsed > SLOW_CALL_SECONDS:
                logger.warning(f"Slow compare API call: {f.__name__} took {elapsed:.1f}s")

            return result

        except RevisionCompareError as e:
            if e.status_code < 500:
                logger.warning(f"{e.code} in {f.__name__}: {e.message}")
            else:
                logger.error(f"{e.code} in {f.__name__}: {e.message}")
            return jsonify({
                'success': False,
                'error': {
                    'code': e.code,
                    'message': e.message
                }
            }), e.status_code
        except Exception as e:
            logger.exception(f"Unexpected error in {f.__name__}: {e}")
            return jsonify({
                'success': False,
                'error': {
                    'code': 'INTERNAL_ERROR',
                    'message': 'An unexpected error occurred'
                }
            }), 500

    return decorated


def _require_strings(data: dict, *fields) -> list:
    """Pull required string fields from a JSON body."""
    values = []
    for name in fields:
        value = data.get(name)
        if value is None:
            raise ValidationError(f"'{name}' is required", field=name)
        if not isinstance(value, str):
            raise ValidationError(f"'{name}' must be a string", field=name)
        values.append(value)
    return values


# =============================================================================
# ENDPOINTS
# =============================================================================

@compare_blueprint.route('/compare', methods=['POST'])
@handle_compare_errors
def compare_documents():
    """
    Compare two HTML documents.

    Request body:
        { left_html: str, right_html: str }

    Returns:
        {
            success: true,
            comparison: { left_html, right_html, summary, detailed, identical }
        }
    """
    data = request.get_json(silent=True) or {}
    left_html, right_html = _require_strings(data, 'left_html', 'right_html')

    comparison = DocumentDiffer().compare_html(left_html, right_html)
    return jsonify({
        'success': True,
        'comparison': comparison.to_dict()
    })


@compare_blueprint.route('/compare/text', methods=['POST'])
@handle_compare_errors
def compare_text():
    """
    Character-level comparison of two plain strings.

    Request body:
        { left_text: str, right_text: str }

    Returns:
        { success: true, comparison: { left, right, summary, left_html, right_html } }
    """
    data = request.get_json(silent=True) or {}
    left_text, right_text = _require_strings(data, 'left_text', 'right_text')

    comparison = DocumentDiffer().compare_texts(left_text, right_text)
    payload = comparison.to_dict()
    payload['left_html'] = highlight_differences(comparison.left)
    payload['right_html'] = highlight_differences(comparison.right)
    return jsonify({
        'success': True,
        'comparison': payload
    })


@compare_blueprint.route('/jobs', methods=['POST'])
@handle_compare_errors
def start_comparison_job():
    """
    Start a background comparison.

    Request body:
        { left_html: str, right_html: str }

    Returns:
        { success: true, job_id: str }  (202)
    """
    data = request.get_json(silent=True) or {}
    left_html, right_html = _require_strings(data, 'left_html', 'right_html')

    job_id = get_job_manager().submit(left_html, right_html)
    return jsonify({
        'success': True,
        'job_id': job_id
    }), 202


@compare_blueprint.route('/jobs/<job_id>', methods=['GET'])
@handle_compare_errors
def get_comparison_job(job_id: str):
    """
    Poll a background comparison.

    Returns:
        { success: true, job: { job_id, status, elapsed, error, result? } }
    """
    job = get_job_manager().get_job(job_id)
    if not job:
        raise ValidationError(f"Job {job_id} not found", field='job_id')

    return jsonify({
        'success': True,
        'job': job.to_dict(include_result=True)
    })


# =============================================================================
# REGISTER BLUEPRINT FUNCTION
# =============================================================================

def register_compare_routes(app: Flask, url_prefix: str = '/api'):
    """Register the comparison blueprint with a Flask app."""
    app.register_blueprint(compare_blueprint, url_prefix=url_prefix)
    logger.info("Revision compare routes registered", url_prefix=url_prefix)


def create_app(url_prefix: str = '/api', config: Optional[dict] = None) -> Flask:
    """
    Build a standalone Flask app serving the comparison API.

    Args:
        url_prefix: Mount point for the endpoints
        config: Extra Flask settings (e.g. TESTING)

    Returns:
        Configured Flask app
    """
    app = Flask(__name__)
    if config:
        app.config.update(config)
    register_compare_routes(app, url_prefix)
    return app


if __name__ == '__main__':
    create_app().run(host='127.0.0.1', port=5000)
