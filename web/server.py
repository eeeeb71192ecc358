"""
KBRT Web API — Flask backend for the article preview UI.

Provides REST endpoints for:
- /api/render — Render article text to styled HTML
- /api/report — Extract score, recommendation and flagged items from a report
- /api/process — Split a full generator response and handle both halves
- /api/themes — List available style themes

Calling the model is not done here; clients post the text they already have.
"""

import time

from flask import Flask, jsonify, request
from flask_cors import CORS

from kbrt import __version__
from kbrt.core.context import RenderRequest
from kbrt.core.engine import get_engine
from kbrt.core.errors import ThemeNotFoundError
from kbrt.render.theme import list_themes
from kbrt.report.extractor import extract_report
from kbrt.report.response import process_response

app = Flask(__name__)
CORS(app)


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _text_field(data: dict, *names: str) -> str:
    for name in names:
        value = data.get(name)
        if isinstance(value, str):
            return value
    return ""


def _error(message: str, status: int, **extra):
    return jsonify({'error': message, **extra}), status


@app.errorhandler(ThemeNotFoundError)
def handle_unknown_theme(e: ThemeNotFoundError):
    return _error(f"Unknown theme: {e.name}", 400, themes=list_themes())


# =============================================================================
# API Routes
# =============================================================================

@app.route('/api/render', methods=['POST'])
def render():
    """Render article text to HTML."""
    data = _payload()
    text = _text_field(data, 'text', 'article')

    if not text.strip():
        return _error('Please provide an article to render', 400)

    request_obj = RenderRequest(text=text, theme=data.get('theme'))
    start_time = time.time()
    result = get_engine().run(request_obj)
    processing_time_ms = round((time.time() - start_time) * 1000)

    return jsonify({
        'success': result.status.value != 'error',
        'status': result.status.value,
        'html': result.html,
        'blocks': [b.model_dump(mode='json', exclude={'source'}) for b in result.document.blocks],
        'diagnostics': [
            {'level': d.level.value, 'code': d.code, 'message': d.message}
            for d in result.diagnostics
        ],
        'metadata': {
            'request_id': request_obj.request_id,
            'processing_time_ms': processing_time_ms,
            'input_length': len(text),
            'output_length': len(result.html),
            'theme': result.theme,
            'version': __version__,
        },
    })


@app.route('/api/report', methods=['POST'])
def report():
    """Extract structured fields from a review report."""
    data = _payload()
    text = _text_field(data, 'text', 'analysis', 'report')

    if not text.strip():
        return _error('Please provide a report to parse', 400)

    extracted = extract_report(text)
    return jsonify({'success': True, **extracted.model_dump(mode='json')})


@app.route('/api/process', methods=['POST'])
def process():
    """Handle a full generator response: article, separator, analysis."""
    data = _payload()
    text = _text_field(data, 'text', 'response')

    if not text.strip():
        return _error('Please provide a generator response to process', 400)

    processed = process_response(text, theme=data.get('theme'))

    return jsonify({
        'success': processed.article.status.value != 'error',
        'optimizedArticle': processed.article.html,
        'analysis': processed.report.raw_text,
        'report': processed.report.model_dump(mode='json', exclude={'raw_text'}),
    })


@app.route('/api/themes', methods=['GET'])
def themes():
    """List style themes."""
    return jsonify({'themes': list_themes()})


if __name__ == '__main__':
    print("🚀 KBRT Web API starting...")
    print("   Open: http://localhost:5050")
    # Note: use_reloader=False prevents terminal signal issues (SIGTSTP)
    # that can occur with Flask's stat reloader in some environments
    app.run(debug=True, port=5050, use_reloader=False)
