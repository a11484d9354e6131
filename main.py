"""
HyperBlockLabs Deployment - Main Entry Point
Deploys the HyperBlockLabs contract and prints its address
"""

import os
import asyncio
import sys
from loguru import logger
from dotenv import load_dotenv

from deployer.deploy_runner import DeployRunner

load_dotenv()

# Configure logging
logger.remove()
logger.add(
    sys.stderr,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>",
    level=os.getenv('LOG_LEVEL', 'INFO')
)
logger.add(
    "data/logs/deploy.log",
    rotation="1 day",
    retention="7 days",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function} - {message}",
    level="DEBUG"
)


async def main() -> int:
    """Main entry point"""
    runner = DeployRunner()
    return await runner.run()


def run():
    """Console script entry point"""
    try:
        exit_code = asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    run()
