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

Batch Forwarder reassembles the batch of tweets referenced by SQS messages and
forwards it to the sentiment analysis Lambda with a single asynchronous invocation.

There is no error handling around reading the tweets. The first missing or malformed object
fails the whole invocation, and the analyser is not called. The SQS trigger then decides what to
do with the batch.
"""

__all__ = ['TweetBatchForwarder']
__author__ = "tweetpipe contributors"
__version__ = "1.0"

import json
import logging

from typing import Dict, List

from tweetpipe.app import Processor
from tweetpipe.components.helpers import get_sqs_message_bodies, get_storage_key_from_body
from tweetpipe.components.s3 import S3Client


logger = logging.getLogger()
logger.setLevel(logging.INFO)


class TweetBatchForwarder(Processor):

    DEFAULT_CONFIG = {
        'init_clients':    ['S3', 'lambda'],
        'required_config': ['tweet_bucket', 'tweet_sentiment_lambda'],
    }

    # these clients will be initialized by Processor constructor
    s3_client: S3Client = None
    lambda_client = None


    def __call__(self, event: Dict):

        bodies = get_sqs_message_bodies(event)
        logger.info(f"Number of events received: {len(bodies)}")

        tweets = [self.fetch_tweet(body) for body in bodies]

        self.invoke_analyser(tweets)

        super().__call__(event)


    def fetch_tweet(self, body: str) -> Dict:
        """ Read the tweet referenced by the `body` of SQS message. """

        key = get_storage_key_from_body(body)
        logger.info(f"SQS message received: {key}")

        tweet = self.s3_client.get_json(self.config['tweet_bucket'], key)
        logger.info(f"Tweet is: {tweet.get('full_text') if isinstance(tweet, dict) else tweet}")
        self.stats['fetched_tweets'] += 1

        return tweet


    def invoke_analyser(self, tweets: List[Dict]):
        """
        Invoke the sentiment analyser Lambda asynchronously with the list of `tweets` as payload.
        We do not wait for the analyser to finish. If the invocation is rejected, the error is only logged.
        """

        function_name = self.config['tweet_sentiment_lambda']
        logger.info(f"Invoking lambda: {function_name}")

        try:
            lambda_response = self.lambda_client.invoke(
                    FunctionName=function_name,
                    InvocationType='Event',
                    Payload=json.dumps(tweets)
            )
        except Exception:
            logger.exception(f"Failed to invoke {function_name} with {len(tweets)} tweets")
            self.stats['failed_invocations'] += 1
            return

        logger.info(lambda_response)
        self.stats['analyser_invocations'] += 1
