"""
桥接服务主入口

用法: centreon-bridge [environment] [config_file]
"""

import asyncio
import logging
import signal
import sys
from pathlib import Path

from aiohttp import web

from .app import create_app
from .config import BridgeConfig

logger = logging.getLogger(__name__)


def setup_logging(config: BridgeConfig):
    """根日志器输出到标准输出，配置了文件时同时写文件"""
    handlers = [logging.StreamHandler(sys.stdout)]
    if config.logging.file:
        log_path = Path(config.logging.file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, str(config.logging.level).upper(), logging.INFO),
        format=config.logging.format,
        handlers=handlers,
    )

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


async def serve(config: BridgeConfig):
    """启动 HTTP 服务并阻塞到收到 SIGINT/SIGTERM"""
    runner = web.AppRunner(create_app(config))
    await runner.setup()
    await web.TCPSite(runner, config.service.host, config.service.port).start()
    logger.info(f"Centreon bridge listening on http://{config.service.host}:{config.service.port}")

    stop = asyncio.Event()
    if sys.platform != 'win32':
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(sig, stop.set)

    try:
        await stop.wait()
    finally:
        logger.info("Stopping Centreon bridge")
        await runner.cleanup()


def run():
    environment = sys.argv[1] if len(sys.argv) > 1 else "development"
    config_file = sys.argv[2] if len(sys.argv) > 2 else None

    config = BridgeConfig(config_file=config_file, environment=environment)
    setup_logging(config)

    if not config.validate():
        logger.error("Configuration is invalid, refusing to start")
        sys.exit(1)

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == '__main__':
    run()
