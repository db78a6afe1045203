# lightpersist/app.py
from typing import Optional

from flask import Flask
from flask_cors import CORS

from lightpersist.config import CORS_ORIGINS
from lightpersist.extension import LightPersistExtension
from lightpersist.http_headers.api import create_api_routes
from lightpersist.logger import setup_logging, log
from lightpersist.repositories.cache import CacheHandler

def create_app(cache: Optional[CacheHandler] = None):
    app = Flask(__name__)
    setup_logging()
    log.info("Starting LightPersist Flask application...")
    # Credentialed CORS (the identity cookie) only for explicitly listed origins
    wildcard = CORS_ORIGINS == ["*"]
    CORS(app, origins="*" if wildcard else CORS_ORIGINS, supports_credentials=not wildcard)

    LightPersistExtension(app, cache)
    create_api_routes(app)
    return app

def main():
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=False)

if __name__ == "__main__":
    main()
