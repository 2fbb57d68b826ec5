import os
from flask import Flask, request, jsonify, send_from_directory, url_for
from flask_cors import CORS
from werkzeug.utils import secure_filename

from container import MARKER_SUFFIX
from errors import (
    EmptyInputError,
    FileIOError,
    MalformedContainerError,
    MalformedStreamError,
    UnencodableTextError,
)
from Text_Compression import compress_file, decompress_file, is_compressed, saved_percent

# -----------------------------------------------------------
# PATH CONFIGURATION
# -----------------------------------------------------------
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
UPLOAD_DIR = os.environ.get("HUFF_UPLOAD_DIR", os.path.join(BASE_DIR, "data", "uploads"))
MAX_UPLOAD_MB = int(os.environ.get("HUFF_MAX_UPLOAD_MB", "16"))

DEFAULT_STATUS = "Compress or decompress a Huffman encoded file"

# -----------------------------------------------------------
# FLASK APP SETUP
# -----------------------------------------------------------
app = Flask(__name__)
app.config.update(
    UPLOAD_DIR=UPLOAD_DIR,
    MAX_CONTENT_LENGTH=MAX_UPLOAD_MB * 1024 * 1024,
)
CORS(app)

# HTTP status per recoverable error
ERROR_STATUS = {
    EmptyInputError: 400,
    UnencodableTextError: 400,
    MalformedContainerError: 422,
    MalformedStreamError: 422,
    FileIOError: 500,
}


# -----------------------------------------------------------
# HELPER FUNCTIONS
# -----------------------------------------------------------
def error_response(message, status):
    return jsonify({"success": False, "error": message}), status


def save_upload():
    """Stores the uploaded ``file`` field; returns its path or None."""
    file = request.files.get("file")
    if not file or not file.filename:
        return None
    filename = secure_filename(file.filename)
    if not filename:
        return None

    upload_dir = app.config["UPLOAD_DIR"]
    os.makedirs(upload_dir, exist_ok=True)
    input_path = os.path.join(upload_dir, filename)
    file.save(input_path)
    return input_path


def handle_compress(input_path):
    report = compress_file(input_path)
    filename = os.path.basename(input_path)
    compressed_filename = os.path.basename(report.path)
    return jsonify({
        "success": True,
        "status": f"Saved compressed file to {compressed_filename}",
        "filename": filename,
        "compressed_filename": compressed_filename,
        "original_size": report.original_size,
        "compressed_size": report.compressed_size,
        "saved": report.original_size - report.compressed_size,
        "saved_percent": saved_percent(report.original_size, report.compressed_size),
        "download_url": url_for("download_file", filename=compressed_filename),
    })


def handle_decompress(input_path):
    output_path = decompress_file(input_path)
    output_filename = os.path.basename(output_path)
    return jsonify({
        "success": True,
        "status": f"Decompressed {os.path.basename(input_path)} to {output_filename}",
        "original_huff": os.path.basename(input_path),
        "decompressed_file": output_filename,
        "download_url": url_for("download_file", filename=output_filename),
    })


def run_action(action, route):
    input_path = save_upload()
    if input_path is None:
        return error_response("No file uploaded", 400)
    try:
        return action(input_path)
    except tuple(ERROR_STATUS) as e:
        app.logger.warning("%s failed for %s: %s", route, input_path, e)
        return error_response(str(e), ERROR_STATUS[type(e)])
    except Exception:
        app.logger.exception("Error in %s", route)
        return error_response("Internal server error", 500)


# -----------------------------------------------------------
# ROUTES
# -----------------------------------------------------------
@app.route("/")
def home():
    return jsonify({"status": DEFAULT_STATUS})


@app.route("/compress_file", methods=["POST"])
def compress_file_route():
    return run_action(handle_compress, "/compress_file")


@app.route("/decompress_file", methods=["POST"])
def decompress_file_route():
    file = request.files.get("file")
    if file and not secure_filename(file.filename or "").endswith(MARKER_SUFFIX):
        return error_response("Invalid file type", 400)
    return run_action(handle_decompress, "/decompress_file")


@app.route("/open_file", methods=["POST"])
def open_file_route():
    # The extension decides which way the file goes
    def dispatch(input_path):
        if is_compressed(input_path):
            return handle_decompress(input_path)
        return handle_compress(input_path)
    return run_action(dispatch, "/open_file")


@app.route("/download/<filename>")
def download_file(filename):
    upload_dir = app.config["UPLOAD_DIR"]
    if not os.path.exists(os.path.join(upload_dir, secure_filename(filename))):
        return "File not found", 404
    return send_from_directory(upload_dir, secure_filename(filename), as_attachment=True)


# -----------------------------------------------------------
if __name__ == "__main__":
    app.run(debug=True)
