from flask import Blueprint, jsonify

from ..extensions import store

bp = Blueprint("collections_api", __name__)


@bp.get("/collections")
def list_collections():
    return jsonify(store.list_collections())


@bp.post("/collections/<collection>")
def create_collection(collection):
    store.create_collection(collection)
    return jsonify({"message": f"Collection {collection} created successfully"})


@bp.get("/collections/<collection>")
def list_documents(collection):
    return jsonify(store.list_documents(collection))


@bp.delete("/collections/<collection>")
def delete_collection(collection):
    store.delete_collection(collection)
    return jsonify({"message": f"Collection {collection} deleted successfully"})
