# src/zentask/server/app.py

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from ..core.errors import ContractViolation, StorageError
from ..core.ports import TaskRepo
from ..tasks.task_models import ApiResponse
from .routes import TASK_STORE_EXTENSION, tasks_bp

logger = logging.getLogger(__name__)


def _fail(message: str, status: int):
    return jsonify(ApiResponse.fail(message).to_dict()), status


def create_app(task_store: TaskRepo, *, settings=None) -> Flask:
    """
    Build the Flask app around an already constructed TaskStore.

    Every error leaves the process as a {"success": false, "error": ...}
    envelope; nothing is rendered as HTML.
    """
    app = Flask(__name__)
    app.json.sort_keys = False
    app.config["ZENTASK_APP_NAME"] = str(getattr(settings, "app_name", "zentask"))
    app.extensions[TASK_STORE_EXTENSION] = task_store

    app.register_blueprint(tasks_bp)

    @app.errorhandler(ContractViolation)
    def _contract_violation(err: ContractViolation):
        logger.info("Rejected request: %s", err)
        return _fail(str(err), err.status_code)

    @app.errorhandler(StorageError)
    def _storage_error(err: StorageError):
        logger.error("Storage failure: %s", err, exc_info=err)
        return _fail("Storage failure", 500)

    @app.errorhandler(HTTPException)
    def _http_error(err: HTTPException):
        return _fail(err.description or err.name, err.code or 500)

    @app.errorhandler(Exception)
    def _unexpected(err: Exception):
        logger.exception("Unhandled error in request handler")
        return _fail("Internal server error", 500)

    return app
