# main.py
import sys

import uvicorn

from map_engine.app.build import build
from map_engine.app.server import create_server
from map_engine.io.config import load_config


def run(config_path: str):
    cfg = load_config(config_path)
    app = build(cfg)
    uvicorn.run(create_server(app), host=cfg.server.host, port=cfg.server.port)


if __name__ == "__main__":
    run(sys.argv[1] if len(sys.argv) > 1 else "config/engine.yaml")
