import logging

logger = logging.getLogger("robyn_nav")
