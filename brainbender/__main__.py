"""
brainbender/__main__.py – command line entry point

Usage:
    python -m brainbender --mode serve       # HTTP API (+ scheduled runs if SCHEDULE_TIMES is set)
    python -m brainbender --mode make        # render and upload one riddle now
    python -m brainbender --mode auth-url    # print the consent URL for a new refresh token

All settings come from environment variables (or a .env file).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

from loguru import logger

from brainbender.config import Config
from brainbender.errors import PublishError
from brainbender.log import configure_logger


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="brainbender", description="Brain Bender Daily riddle Shorts")
    parser.add_argument("--mode", choices=["serve", "make", "auth-url"], default="serve")
    args = parser.parse_args(argv)

    cfg = Config.from_env()
    configure_logger(cfg.log_level, cfg.log_dir)

    if args.mode == "serve":
        import uvicorn

        from brainbender.server import create_app

        logger.info(f"[Main] Server listening on {cfg.host}:{cfg.port}")
        level = cfg.log_level.lower()
        if level not in {"critical", "error", "warning", "info", "debug", "trace"}:
            level = "info"
        uvicorn.run(create_app(cfg), host=cfg.host, port=cfg.port, log_level=level)
        return 0

    from brainbender.pipeline import RiddlePipeline
    from brainbender.server import build_credentials

    credentials = build_credentials(cfg)

    if args.mode == "auth-url":
        try:
            url = credentials.authorization_url()
        except PublishError as e:
            logger.error(f"[Main] Cannot build consent URL: {e}")
            return 1
        print(url)
        return 0

    pipeline = RiddlePipeline.from_config(cfg, credentials)
    try:
        result = asyncio.run(pipeline.run())
    except Exception as e:
        logger.exception(f"[Main] Run failed: {e}")
        return 1
    print(json.dumps(result.as_json(), ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
