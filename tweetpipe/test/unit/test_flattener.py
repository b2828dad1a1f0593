import json
import os
import unittest

from unittest.mock import MagicMock, patch, call

from tweetpipe.app import LambdaGlobals, get_lambda_handler
from tweetpipe.flattener import TweetFlattener
from tweetpipe.components.s3 import S3Client
from tweetpipe.test.variables import TEST_FLATTENER_CONFIG, TWEETS


def fake_upload(bucket, key, data):
    return {
        'Location': f"https://{bucket}.s3.amazonaws.com/{key}",
        'ETag':     f'"etag-{data["id"]}"',
        'Bucket':   bucket,
        'Key':      key,
    }


class TweetFlattener_UnitTestCase(unittest.TestCase):
    TEST_CONFIG = TEST_FLATTENER_CONFIG


    def setUp(self):
        self.s3_client = MagicMock()
        self.s3_client.upload_json.side_effect = fake_upload
        self.sqs_client = MagicMock()

        with patch('boto3.client'):
            self.flattener = TweetFlattener(custom_config=self.TEST_CONFIG, s3_client=self.s3_client,
                                            sqs_client=self.sqs_client)


    def test_call__stores_each_tweet(self):
        self.flattener(TWEETS)

        self.assertEqual(self.s3_client.upload_json.call_count, len(TWEETS))
        for tweet, c in zip(TWEETS, self.s3_client.upload_json.call_args_list):
            self.assertEqual(c, call('autotest-tweets-bucket', f"tweets/{tweet['id']}.tweet.json", tweet))


    def test_call__publishes_upload_result_for_each_tweet(self):
        self.flattener(TWEETS)

        self.assertEqual(self.sqs_client.send_message.call_count, len(TWEETS))
        for tweet, c in zip(TWEETS, self.sqs_client.send_message.call_args_list):
            expected_result = fake_upload('autotest-tweets-bucket', f"tweets/{tweet['id']}.tweet.json", tweet)

            self.assertEqual(c.kwargs['QueueUrl'], self.TEST_CONFIG['tweet_queue'])
            self.assertEqual(c.kwargs['MessageBody'], json.dumps(expected_result))


    def test_call__upload_fails__no_message_and_continues(self):
        self.s3_client.upload_json.side_effect = [fake_upload('b', 'k1', TWEETS[0]),
                                                  Exception("Access Denied"),
                                                  fake_upload('b', 'k3', TWEETS[2])]

        self.flattener(TWEETS)

        self.assertEqual(self.s3_client.upload_json.call_count, 3)
        self.assertEqual(self.sqs_client.send_message.call_count, 2)

        bodies = [json.loads(c.kwargs['MessageBody']) for c in self.sqs_client.send_message.call_args_list]
        self.assertEqual([b['Key'] for b in bodies], ['k1', 'k3'])
        self.assertEqual(self.flattener.stats['failed_tweets'], 1)


    def test_call__publish_fails__continues(self):
        self.sqs_client.send_message.side_effect = [Exception("Queue does not exist"), {}, {}]

        self.flattener(TWEETS)

        self.assertEqual(self.s3_client.upload_json.call_count, 3)
        self.assertEqual(self.sqs_client.send_message.call_count, 3)
        self.assertEqual(self.flattener.stats['stored_tweets'], 3)
        self.assertEqual(self.flattener.stats['queued_notifications'], 2)
        self.assertEqual(self.flattener.stats['failed_tweets'], 1)


    def test_call__tweet_without_id__skipped(self):
        self.flattener([{'full_text': 'no id here'}, TWEETS[0]])

        self.s3_client.upload_json.assert_called_once_with('autotest-tweets-bucket', 'tweets/1.tweet.json', TWEETS[0])
        self.sqs_client.send_message.assert_called_once()


    def test_call__returns_none(self):
        self.assertIsNone(self.flattener(TWEETS))


    def test_call__empty_batch(self):
        self.flattener([])

        self.s3_client.upload_json.assert_not_called()
        self.sqs_client.send_message.assert_not_called()
        self.assertEqual(self.flattener.stats['processor_calls'], 1)


    def test_call__not_list__raises(self):
        with self.assertRaises(ValueError):
            self.flattener({'id': '1', 'full_text': 'hello'})


    def test_call__end_to_end__single_tweet(self):
        boto_s3 = MagicMock()
        boto_s3.put_object.return_value = {'ETag': '"d41d8cd98f00b204e9800998ecf8427e"'}
        sqs_client = MagicMock()

        flattener = TweetFlattener(custom_config=self.TEST_CONFIG, s3_client=S3Client(client=boto_s3),
                                   sqs_client=sqs_client)
        flattener([{"id": "1", "full_text": "hello"}])

        boto_s3.put_object.assert_called_once_with(Bucket='autotest-tweets-bucket', Key='tweets/1.tweet.json',
                                                   Body=b'{"id":"1","full_text":"hello"}',
                                                   ContentType='application/json')

        sqs_client.send_message.assert_called_once()
        body = json.loads(sqs_client.send_message.call_args.kwargs['MessageBody'])
        self.assertEqual(body['Key'], 'tweets/1.tweet.json')
        self.assertEqual(body['Bucket'], 'autotest-tweets-bucket')
        self.assertEqual(body['ETag'], '"d41d8cd98f00b204e9800998ecf8427e"')


    def test_call__empty_prefix(self):
        flattener = TweetFlattener(custom_config={**self.TEST_CONFIG, 'tweet_bucket_prefix': ''},
                                   s3_client=self.s3_client, sqs_client=self.sqs_client)
        flattener([TWEETS[0]])

        self.s3_client.upload_json.assert_called_once_with('autotest-tweets-bucket', '/1.tweet.json', TWEETS[0])
        self.sqs_client.send_message.assert_called_once()


    @patch('boto3.client')
    def test_lambda_handler__configured_from_environment(self, mock_boto_client):
        boto_s3, boto_sqs = MagicMock(), MagicMock()
        boto_s3.put_object.return_value = {'ETag': '"etag"'}
        mock_boto_client.side_effect = lambda service, **kwargs: {'s3': boto_s3, 'sqs': boto_sqs}[service]

        environment = {
            'TWEET_BUCKET':        'env-tweets-bucket',
            'TWEET_BUCKET_PREFIX': 'tweets',
            'TWEET_QUEUE':         'https://sqs.us-west-2.amazonaws.com/000000000000/env_tweets_queue',
        }
        with patch.dict(os.environ, environment):
            lambda_handler = get_lambda_handler(TweetFlattener, LambdaGlobals())
            result = lambda_handler([{"id": "1", "full_text": "hello"}], None)

        self.assertIsNone(result)
        boto_s3.put_object.assert_called_once_with(Bucket='env-tweets-bucket', Key='tweets/1.tweet.json',
                                                   Body=b'{"id":"1","full_text":"hello"}',
                                                   ContentType='application/json')

        boto_sqs.send_message.assert_called_once()
        kwargs = boto_sqs.send_message.call_args.kwargs
        self.assertEqual(kwargs['QueueUrl'], environment['TWEET_QUEUE'])
        self.assertEqual(json.loads(kwargs['MessageBody'])['Key'], 'tweets/1.tweet.json')


if __name__ == '__main__':
    unittest.main()
