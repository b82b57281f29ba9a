import os
from urllib.parse import quote

import httpx
from dotenv import load_dotenv

DEFAULT_SERVER = "http://localhost:8080"


class DocStoreClient:
    def __init__(self, base_url: str | None = None, timeout: float = 30):
        load_dotenv()
        self.base = (base_url or os.getenv("DOCSTORE_SERVER") or DEFAULT_SERVER).rstrip("/")
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}

    def _url(self, *parts: str) -> str:
        return self.base + "/" + "/".join(quote(str(p), safe="") for p in parts)

    def _request(self, method: str, url: str, **kwargs):
        with httpx.Client(timeout=self.timeout) as client:
            r = client.request(method, url, headers=self.headers, **kwargs)
            try:
                r.raise_for_status()
            except httpx.HTTPStatusError as e:
                raise httpx.HTTPStatusError(f"{e} — body: {r.text}", request=e.request, response=e.response)
            return r.json()

    # --- collections ---

    def list_collections(self) -> list[str]:
        return self._request("GET", self._url("collections"))

    def create_collection(self, collection: str) -> dict:
        return self._request("POST", self._url("collections", collection))

    def delete_collection(self, collection: str) -> dict:
        return self._request("DELETE", self._url("collections", collection))

    def list_documents(self, collection: str) -> list[str]:
        return self._request("GET", self._url("collections", collection))

    # --- documents ---

    def get_document(self, collection: str, document: str) -> dict:
        return self._request("GET", self._url("document", collection, document))

    def create_document(self, collection: str, document: str, data: dict) -> dict:
        """POST a document; merges into an existing one of the same name. Returns the stored document."""
        body = self._request("POST", self._url("document", collection, document), json=data)
        return body.get("document", {})

    def update_document(self, collection: str, document: str, data: dict) -> dict:
        """PUT a partial document; keys not in ``data`` are left as stored."""
        body = self._request("PUT", self._url("document", collection, document), json=data)
        return body.get("document", {})

    def delete_document(self, collection: str, document: str) -> dict:
        return self._request("DELETE", self._url("document", collection, document))

    def filter_documents(self, collection: str, filters: dict, typed: bool = False) -> list[dict]:
        """Equality filter over a collection.

        With ``typed=False`` filters go in the query string (the server parses
        numbers/booleans/null out of them). ``typed=True`` sends them as a JSON body
        so e.g. the string "1" can be told apart from the number 1.
        """
        url = self._url("filterCollections", collection)
        if typed:
            return self._request("POST", url, json=filters)
        params = {k: v if isinstance(v, str) else _to_query(v) for k, v in filters.items()}
        return self._request("GET", url, params=params)


def _to_query(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
