# docstore/extensions.py
from flask_cors import CORS

from .config import Config
from .storage import JsonStore, LocalFileStore

# CORS is a real Flask extension (keeps init_app)
cors = CORS()

# One store per process; its lock serializes every storage call.
# DATA_DIR is read once at import from the environment; create_app's
# config_class does not move it.
store = JsonStore(LocalFileStore(Config.DATA_DIR))
