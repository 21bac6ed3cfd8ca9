#!/usr/bin/env python3
"""
Main entry point for the Tello autopilot
Web controller with patrol and face tracking

Run this file to start the application:
python main.py
"""

import logging
import sys

from tello_autopilot.config import ConfigError, load_config
from tello_autopilot.initialization import initialize_drone_manager, logging_settings
from tello_autopilot.webserver import start_web_server

logger = logging.getLogger(__name__)


def main():
    """Main function - Entry point of the application"""
    try:
        config = load_config()
    except ConfigError as e:
        logger.error("%s", e)
        sys.exit(1)

    logging_settings(config.log_file)
    logger.info("Starting Tello autopilot")

    drone = initialize_drone_manager(config)
    try:
        start_web_server(drone, config.address, config.port)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt detected")
    except Exception as e:
        logger.error("Error occurred: %s", e)
    finally:
        logger.info("Shutting down...")
        drone.shutdown()


if __name__ == '__main__':
    main()
