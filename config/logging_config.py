# Simple logger

import logging
import os
import sys

LOG_DIR = os.environ.get("SIGMOIDNET_LOG_DIR", "logs")


def setup_logging(log_dir=LOG_DIR, level=logging.INFO):
    os.makedirs(log_dir, exist_ok=True)
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(os.path.join(log_dir, "sigmoidnet.log"))
        ]
    )

setup_logging()

logger = logging.getLogger("sigmoidnet")
