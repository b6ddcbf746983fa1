"""
wasm-sourcemap Flask Server

Features:
- Single-request module upload (multipart or raw body)
- Same JSON documents as the command line tool
- Early rejection of non-WebAssembly uploads
"""

import os
import re
from typing import Optional, Tuple

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException
from werkzeug.utils import secure_filename

# Import the extractor modules
from wasm_sourcemap_py import __version__
from wasm_sourcemap_py.cli import extract
from wasm_sourcemap_py.config import Config
from wasm_sourcemap_py.errors import SourceMapError
from wasm_sourcemap_py.output.source_map import ErrorDocument

app = Flask(__name__)

# Configuration
app.config['MAX_CONTENT_LENGTH'] = 256 * 1024 * 1024  # 256MB max upload

WASM_MAGIC_BYTES = b'\0asm'


def sanitize_filename(filename: str) -> str:
    """Sanitize filename for use in a Content-Disposition header."""
    filename = secure_filename(filename)
    filename = re.sub(r'[^\w\-_\.]', '_', filename)
    if len(filename) > 255:
        name, ext = os.path.splitext(filename)
        filename = name[:250] + ext
    return filename


def read_upload() -> Tuple[Optional[bytes], str]:
    """Return the uploaded module and its file name."""
    if 'file' in request.files:
        upload = request.files['file']
        return upload.read(), upload.filename or 'module.wasm'
    data = request.get_data()
    if not data:
        return None, ''
    return data, 'module.wasm'


def config_from_request() -> Config:
    """Build the extraction config from query parameters."""
    config = Config.load(None)
    config.verbose = False
    if 'format' in request.args:
        config.output_format = request.args['format']
    if 'lineOrder' in request.args:
        config.line_order = request.args['lineOrder']
    config.validate()
    return config


def error_response(message: str, status: int) -> Tuple[Response, int]:
    return jsonify(ErrorDocument(error=message).to_dict()), status


# ============== Routes ==============

@app.route('/api/health')
def health():
    """Health check."""
    return jsonify({'status': 'ok', 'version': __version__})


@app.route('/api/sourcemap', methods=['POST'])
def sourcemap():
    """Extract the source map of an uploaded module."""
    data, filename = read_upload()
    if data is None:
        return error_response('No module uploaded', 400)

    if not data.startswith(WASM_MAGIC_BYTES):
        return error_response('Not a WebAssembly module', 400)

    try:
        config = config_from_request()
    except ValueError as e:
        return error_response(str(e), 400)

    try:
        document = extract(data, config)
    except SourceMapError as e:
        return error_response(str(e), 400)

    response = jsonify(document.to_dict())
    if request.args.get('download'):
        name = sanitize_filename(filename) or 'module.wasm'
        response.headers['Content-Disposition'] = f'attachment; filename={name}.map.json'
    return response


@app.route('/api/docs')
def api_docs():
    """API documentation."""
    return jsonify({
        'name': 'wasm-sourcemap API',
        'version': __version__,
        'endpoints': {
            'GET /api/health': {
                'description': 'Health check'
            },
            'POST /api/sourcemap': {
                'description': 'Extract the DWARF source map of a WebAssembly module',
                'content_type': 'multipart/form-data (field "file") or application/wasm',
                'query': {
                    'format': 'grouped (default), compact or units',
                    'lineOrder': 'address (default) or position',
                    'download': 'set to return the document as an attachment'
                },
                'response': {'files': [{'file': 'string', 'language': 'number', 'lines': '[[address, line, column]]'}]},
                'errors': {'error': 'string'}
            }
        },
        'limits': {
            'max_upload_size': f"{app.config['MAX_CONTENT_LENGTH'] // (1024 * 1024)} MB"
        }
    })


@app.errorhandler(HTTPException)
def handle_http_error(e: HTTPException):
    """Report HTTP errors (413, 404, ...) as error documents."""
    return error_response(e.description or e.name, e.code or 500)


if __name__ == '__main__':
    print("=" * 60)
    print(f"wasm-sourcemap Server v{__version__}")
    print("=" * 60)
    print("Endpoint: http://localhost:5000/api/sourcemap")
    print("API Docs: http://localhost:5000/api/docs")
    print("=" * 60)

    app.run(host='0.0.0.0', port=5000, debug=False, threaded=True)
