import json

from flask import Blueprint, current_app, jsonify, request

from ..extensions import store
from ..storage import InvalidPayload
from ..storage.predicates import SCALAR_TYPES

bp = Blueprint("documents_api", __name__)


def _json_object_body() -> dict:
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        raise InvalidPayload("request body must be a JSON object")
    return payload


def _query_value(raw: str):
    """Query-string values are JSON scalars when they parse as one (1, true, null, "x"), else plain strings."""
    try:
        value = json.loads(raw)
    except ValueError:
        return raw
    return value if isinstance(value, SCALAR_TYPES) else raw


@bp.get("/document/<collection>/<document>")
def get_document(collection, document):
    return jsonify(store.get_document(collection, document))


@bp.route("/document/<collection>/<document>", methods=["POST", "PUT"])
def create_or_update_document(collection, document):
    payload = _json_object_body()
    saved = store.create_or_update_document(collection, document, payload)
    return jsonify({"message": "Document created/updated successfully", "document": saved})


@bp.delete("/document/<collection>/<document>")
def delete_document(collection, document):
    store.delete_document(collection, document)
    return jsonify({"message": "Document deleted successfully"})


@bp.get("/filterCollections/<collection>")
def filter_documents(collection):
    # First value wins for repeated keys.
    predicate = {key: _query_value(request.args.get(key)) for key in request.args.keys()}
    docs = store.filter_documents(collection, predicate)
    current_app.logger.debug("Filter on %s with %s matched %d documents", collection, predicate, len(docs))
    return jsonify(docs)


@bp.post("/filterCollections/<collection>")
def filter_documents_typed(collection):
    predicate = _json_object_body()
    return jsonify(store.filter_documents(collection, predicate))
