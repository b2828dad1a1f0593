"""Tweet Flattener
"""

import logging

from tweetpipe.flattener import TweetFlattener
from tweetpipe.app import LambdaGlobals, get_lambda_handler

logger = logging.getLogger()
logger.setLevel(logging.INFO)


global_vars = LambdaGlobals()
lambda_handler = get_lambda_handler(TweetFlattener, global_vars)
