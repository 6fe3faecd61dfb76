import logging
import os

from flask import Flask, jsonify, request, send_from_directory, url_for
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from werkzeug.utils import secure_filename

from errors import HuffmanError
from Text_Compression import COMPRESSED_EXTENSION, compress_text, decompress_text

# -----------------------------------------------------------
# PATH CONFIGURATION
# -----------------------------------------------------------
BASE_DIR = os.path.abspath(os.path.dirname(__file__))
DATA_DIR = os.environ.get("HUFFMAN_DATA_DIR", os.path.join(BASE_DIR, "data"))
MAX_UPLOAD_MB = int(os.environ.get("HUFFMAN_MAX_UPLOAD_MB", "16"))

TEXT_EXTENSIONS = {"txt"}
ARTIFACT_EXTENSIONS = {"huff"}

# -----------------------------------------------------------
# FLASK APP SETUP
# -----------------------------------------------------------
app = Flask(__name__)
app.config.update(
    DATA_DIR=DATA_DIR,
    MAX_CONTENT_LENGTH=MAX_UPLOAD_MB * 1024 * 1024,
)
CORS(app)

# -----------------------------------------------------------
# HELPER FUNCTIONS
# -----------------------------------------------------------
class UploadError(Exception):
    """Client-side problem with an uploaded file."""


def compressed_dir():
    path = os.path.join(app.config["DATA_DIR"], "compressed")
    os.makedirs(path, exist_ok=True)
    return path


def decompressed_dir():
    path = os.path.join(app.config["DATA_DIR"], "decompressed")
    os.makedirs(path, exist_ok=True)
    return path


def error_response(message, status):
    return jsonify({"success": False, "error": message}), status


def read_upload(allowed_extensions):
    """
    Returns (filename, text) for the uploaded 'file' field, or raises
    UploadError with a client-facing message.
    """
    file = request.files.get("file")
    if not file or not file.filename:
        raise UploadError("No file uploaded")

    filename = secure_filename(file.filename)
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else ""
    if ext not in allowed_extensions:
        allowed = ", ".join(sorted(allowed_extensions))
        raise UploadError(f"Only {allowed} files allowed")

    try:
        text = file.read().decode("utf-8")
    except UnicodeDecodeError:
        raise UploadError("Only UTF-8 text files are supported") from None
    return filename, text


def write_text(path, text):
    # newline="" so the artifact and decoded text are written byte-for-byte
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)

# -----------------------------------------------------------
# ERROR HANDLERS
# -----------------------------------------------------------
@app.errorhandler(UploadError)
def handle_upload_error(e):
    return error_response(str(e), 400)


@app.errorhandler(HuffmanError)
def handle_huffman_error(e):
    app.logger.warning("Rejected input: %s", e)
    return error_response(str(e), 400)


@app.errorhandler(413)
def handle_too_large(e):
    return error_response(f"File exceeds the {MAX_UPLOAD_MB} MB limit", 413)


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    app.logger.exception("Unhandled error on %s", request.path)
    return error_response("Internal server error", 500)

# -----------------------------------------------------------
# ROUTES
# -----------------------------------------------------------
@app.route("/")
def home():
    return jsonify({
        "service": "huffman-text-compressor",
        "endpoints": {
            "encode": url_for("api_encode"),
            "decode": url_for("api_decode"),
            "compress_file": url_for("compress_file_route"),
            "decompress_file": url_for("decompress_file_route"),
        },
    })

# -----------------------------------------------------------
# JSON API ROUTES
# -----------------------------------------------------------
@app.route("/api/encode", methods=["POST"])
def api_encode():
    data = request.get_json(silent=True) or {}
    text = data.get("text")
    if not isinstance(text, str):
        return error_response("Field 'text' is required", 400)

    result = compress_text(text)
    app.logger.info("Encoded %d characters (ratio %.2f)",
                    result["original_size"], result["compression_ratio"])
    return jsonify({
        "success": True,
        "artifact": result["artifact"],
        "tree": result["tree"],
        "info": result["info"],
        "compression_ratio": result["compression_ratio"],
    })


@app.route("/api/decode", methods=["POST"])
def api_decode():
    data = request.get_json(silent=True) or {}
    artifact = data.get("artifact")
    if not isinstance(artifact, str):
        return error_response("Field 'artifact' is required", 400)

    result = decompress_text(artifact)
    app.logger.info("Decoded %d characters", len(result["text"]))
    return jsonify({
        "success": True,
        "text": result["text"],
        "tree": result["tree"],
        "info": result["info"],
    })

# -----------------------------------------------------------
# FILE ROUTES
# -----------------------------------------------------------
@app.route("/compress_file", methods=["POST"])
def compress_file_route():
    filename, text = read_upload(TEXT_EXTENSIONS)

    result = compress_text(text)

    compressed_filename = f"{filename}{COMPRESSED_EXTENSION}"
    compressed_path = os.path.join(compressed_dir(), compressed_filename)
    write_text(compressed_path, result["artifact"])

    original_size = len(text.encode("utf-8"))
    compressed_size = os.path.getsize(compressed_path)
    saved = original_size - compressed_size
    saved_percent = round(saved / original_size * 100, 2) if original_size else 0

    app.logger.info("Compressed %s -> %s", filename, compressed_filename)
    return jsonify({
        "success": True,
        "filename": filename,
        "compressed_filename": compressed_filename,
        "original_size": original_size,
        "compressed_size": compressed_size,
        "saved": saved,
        "saved_percent": saved_percent,
        "compression_ratio": result["compression_ratio"],
        "tree": result["tree"],
        "info": result["info"],
        "download_url": url_for("download_file", kind="compressed", filename=compressed_filename),
    })


@app.route("/decompress_file", methods=["POST"])
def decompress_file_route():
    filename, artifact = read_upload(ARTIFACT_EXTENSIONS)

    result = decompress_text(artifact)

    output_filename = filename[:-len(COMPRESSED_EXTENSION)]
    if "." not in output_filename:
        output_filename += ".txt"
    write_text(os.path.join(decompressed_dir(), output_filename), result["text"])

    app.logger.info("Decompressed %s -> %s", filename, output_filename)
    return jsonify({
        "success": True,
        "original_huff": filename,
        "decompressed_file": output_filename,
        "tree": result["tree"],
        "info": result["info"],
        "download_url": url_for("download_file", kind="decompressed", filename=output_filename),
    })


@app.route("/download/<kind>/<filename>")
def download_file(kind, filename):
    if kind == "compressed":
        directory = compressed_dir()
    elif kind == "decompressed":
        directory = decompressed_dir()
    else:
        return "File not found", 404

    filename = secure_filename(filename)
    if not os.path.exists(os.path.join(directory, filename)):
        return "File not found", 404

    return send_from_directory(directory, filename, as_attachment=True,
                               mimetype="application/octet-stream")

# -----------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=os.environ.get("HUFFMAN_LOG_LEVEL", "INFO"))
    app.run(debug=True)
