"""Flask application factory for the py-memfs inspection API.

``create_app`` mounts a filesystem (or serves the one it is given) and
returns a Flask app with these endpoints:

- ``GET /api/status`` — inode and block usage.
- ``GET /api/stat?path=...`` — attributes of one node.
- ``GET /api/list?path=...`` — directory records in storage order.
- ``GET /api/read?path=...&offset=...&size=...`` — file bytes as text.
- ``GET /api/log`` — the operation log.
- ``POST /api/execute`` — run any operation through the dispatcher.

Every filesystem call goes through ``dispatch`` so the web UI sees the
same result values, errno codes, and log entries a bridge would.
"""

from __future__ import annotations

import base64
from typing import Any

from flask import Flask, Response, jsonify, request

from py_memfs.errors import NotFoundError
from py_memfs.filesystem import FileSystem
from py_memfs.logging import Logger
from py_memfs.operations import FsOp, OpResult, Operations, dispatch

_HTTP_BAD_REQUEST = 400
_HTTP_NOT_FOUND = 404


def _result_json(result: OpResult) -> dict[str, Any]:
    """Render a result, base64-encoding byte payloads."""
    data = result.to_dict()
    if isinstance(result.value, bytes):
        data["value"] = base64.b64encode(result.value).decode("ascii")
        data["encoding"] = "base64"
    return data


def _decode_args(op: FsOp, args: dict[str, Any]) -> dict[str, Any]:
    """Turn JSON write payloads into bytes."""
    if op is FsOp.WRITE and isinstance(args.get("data"), str):
        raw: str = args["data"]
        if args.pop("encoding", None) == "base64":
            args["data"] = base64.b64decode(raw, validate=True)
        else:
            args["data"] = raw.encode()
    if op is FsOp.UTIMENS and args.get("times") is not None:
        args["times"] = tuple(args["times"])
    return args


def create_app(fs: FileSystem | None = None, *, logger: Logger | None = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        fs: The filesystem to expose; a fresh one is mounted by default.
        logger: Operation log shared with the dispatcher.

    Returns:
        A configured Flask application ready to serve.

    """
    operations = Operations(fs, logger=logger)
    app = Flask(__name__)
    app.config["MEMFS_OPERATIONS"] = operations

    def _run(op: FsOp, **kwargs: Any) -> tuple[Response, int] | Response:
        result = dispatch(operations.fs, op, logger=operations.logger, **kwargs)
        if result.ok:
            return jsonify(_result_json(result))
        status = _HTTP_NOT_FOUND if isinstance(result.error, NotFoundError) else _HTTP_BAD_REQUEST
        return jsonify(_result_json(result)), status

    @app.route("/api/status")
    def status() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return inode and block usage."""
        return jsonify(operations.fs.usage())

    @app.route("/api/stat")
    def stat() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return attributes of ``?path=``."""
        return _run(FsOp.GETATTR, path=request.args.get("path", "/"))

    @app.route("/api/list")
    def list_dir() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return the names in directory ``?path=``."""
        return _run(FsOp.READDIR, path=request.args.get("path", "/"))

    @app.route("/api/read")
    def read() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Return bytes of file ``?path=`` (base64)."""
        path = request.args.get("path")
        if path is None:
            return jsonify({"error": "Missing 'path' parameter"}), _HTTP_BAD_REQUEST
        offset = request.args.get("offset", 0, type=int)
        size = request.args.get("size", operations.fs.geometry.max_file_size, type=int)
        return _run(FsOp.READ, path=path, offset=offset, size=size)

    @app.route("/api/log")
    def log() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the operation log, oldest first."""
        return jsonify([str(entry) for entry in operations.logger.entries])

    @app.route("/api/execute", methods=["POST"])
    def execute() -> tuple[Response, int] | Response:  # pyright: ignore[reportUnusedFunction]
        """Run one operation.

        Expects JSON body: ``{"op": "mkdir", "args": {"path": "/a"}}``

        """
        data = request.get_json(silent=True)
        if data is None or "op" not in data:
            return jsonify({"error": "Missing 'op' field"}), _HTTP_BAD_REQUEST
        try:
            op = FsOp(data["op"])
        except ValueError:
            return jsonify({"error": f"Unknown operation: {data['op']}"}), _HTTP_BAD_REQUEST
        args = data.get("args") or {}
        if not isinstance(args, dict):
            return jsonify({"error": "'args' must be an object"}), _HTTP_BAD_REQUEST
        try:
            return _run(op, **_decode_args(op, args))
        except (KeyError, TypeError, ValueError) as e:
            return jsonify({"error": f"Bad arguments for {op.value}: {e}"}), _HTTP_BAD_REQUEST

    return app


def main() -> None:
    """Run the inspection API development server.

    This is the ``py-memfs-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
