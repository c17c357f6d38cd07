import logging

logger = logging.getLogger("wraptrace")
logger.setLevel(logging.INFO)
