"""Tweet Batch Forwarder

Triggered by the SQS queue of stored tweets. Forwards every batch to the sentiment analyser Lambda.
"""

import logging

from tweetpipe.forwarder import TweetBatchForwarder
from tweetpipe.app import LambdaGlobals, get_lambda_handler

logger = logging.getLogger()
logger.setLevel(logging.INFO)


global_vars = LambdaGlobals()
lambda_handler = get_lambda_handler(TweetBatchForwarder, global_vars)
