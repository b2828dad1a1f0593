"""
..  hidden-code-block:: text
    :label: View Licence Agreement <br>

    tweetpipe - Tweet flattening and forwarding Lambdas

    The MIT License (MIT)
    Copyright (C) 2019  tweetpipe contributors

    Permission is hereby granted, free of charge, to any person obtaining a copy
    of this software and associated documentation files (the "Software"), to deal
    in the Software without restriction, including without limitation the rights
    to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
    copies of the Software, and to permit persons to whom the Software is
    furnished to do so, subject to the following conditions:

    The above copyright notice and this permission notice shall be included in all
    copies or substantial portions of the Software.

    THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
    IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
    FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
    AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
    LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
    OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
    SOFTWARE.

Flattener stores every tweet of the incoming batch as a separate JSON object in S3
and notifies the queue about each stored object.

Failures are handled per tweet: the error is logged and the next tweet is processed.
The invocation itself never fails because of a single tweet.
"""

__all__ = ['TweetFlattener']
__author__ = "tweetpipe contributors"
__version__ = "1.0"

import json
import logging

from typing import Dict, List

from tweetpipe.app import Processor
from tweetpipe.components.helpers import make_tweet_key
from tweetpipe.components.s3 import S3Client


logger = logging.getLogger()
logger.setLevel(logging.INFO)


class TweetFlattener(Processor):
    """
    The ``__call__`` method accepts the ``event`` of the Lambda invocation, which is a list of tweets.
    Each tweet must have an `id`. The rest of the fields are stored as is.

    Configuration (usually from environment variables):

    * `tweet_bucket`          - Bucket to store tweets.
    * `tweet_bucket_prefix`   - Prefix of keys in the bucket.
    * `tweet_queue`           - URL of SQS queue to notify about stored tweets.
    """

    DEFAULT_CONFIG = {
        'init_clients':    ['S3', 'sqs'],
        'required_config': ['tweet_bucket', 'tweet_bucket_prefix', 'tweet_queue'],
    }

    # these clients will be initialized by Processor constructor
    s3_client: S3Client = None
    sqs_client = None


    def __call__(self, event: List[Dict]):

        if not isinstance(event, list):
            raise ValueError(f"{self.__class__.__name__} expects a list of tweets, received: {type(event)}")

        logger.info(f"Number of tweets {len(event)}")

        for tweet in event:
            try:
                self.flatten_tweet(tweet)
            except Exception:
                logger.exception(f"Failed to store tweet {tweet}")
                self.stats['failed_tweets'] += 1

        logger.info("EXECUTION COMPLETED")

        super().__call__(event)


    def flatten_tweet(self, tweet: Dict):
        """
        Store a single `tweet` in S3 and send the result of the upload to the queue.
        If the upload fails, nothing is sent. Exceptions are not handled here.
        """

        key = make_tweet_key(self.config['tweet_bucket_prefix'], tweet['id'])
        logger.info(f"Key: {key}")

        upload_result = self.s3_client.upload_json(self.config['tweet_bucket'], key, tweet)
        self.stats['stored_tweets'] += 1

        sqs_response = self.sqs_client.send_message(
                QueueUrl=self.config['tweet_queue'],
                MessageBody=json.dumps(upload_result)
        )
        logger.debug(f"SQS.send_message() received response: {sqs_response}")
        self.stats['queued_notifications'] += 1
