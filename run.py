import logging
import os

from docstore import create_app
from docstore.config import DevConfig, ProdConfig

config_class = ProdConfig if os.getenv("DOCSTORE_ENV", "dev").strip().lower() == "prod" else DevConfig
logging.basicConfig(
    level=config_class.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app(config_class)

if __name__ == "__main__":
    app.logger.info("Serving %s on %s:%s", config_class.DATA_DIR, config_class.HOST, config_class.PORT)
    # Threaded: requests run concurrently, the store lock serializes storage calls.
    app.run(host=config_class.HOST, port=config_class.PORT, debug=app.config["DEBUG"], threaded=True)
