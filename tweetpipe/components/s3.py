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
"""

__all__ = ['S3Client']
__author__ = "tweetpipe contributors"
__version__ = "1.0"

import boto3
import json
import logging
import os

from collections import defaultdict


logger = logging.getLogger()


class S3Client:
    """
    AWS S3 helper to store and read single JSON documents.
    Requires the Role to have permissions `s3:PutObject` and/or `s3:GetObject` for the bucket.

    The upload returns a result in the shape of an S3 managed upload:
    ``{"Location": ..., "ETag": ..., "Bucket": ..., "Key": ...}``. It is JSON serialisable,
    so it can be forwarded as is in notifications about the stored object.
    """

    CONTENT_TYPE = 'application/json'


    def __init__(self, **kwargs):
        """
        :param dict config:     Optional config. Supports `region`.
        :param client:          Optional boto3 S3 client to use instead of creating a new one.
        """

        self.stats = defaultdict(int)
        self.config = kwargs.get('config', kwargs.get('custom_config', {})) or {}

        region = self.config.get('region', os.getenv('AWS_REGION'))
        self.client = kwargs.get('client') or boto3.client('s3', region_name=region)


    def upload_json(self, bucket: str, key: str, data) -> dict:
        """
        Serialise `data` to JSON and write it to `bucket` under `key`.

        :param str bucket:  Name of the bucket.
        :param str key:     Key of the object.
        :param data:        Any JSON serialisable object.
        :rtype:             dict
        :return:            Result of the upload with `Location`, `ETag`, `Bucket` and `Key`.
        """

        response = self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=json.dumps(data, separators=(',', ':'), ensure_ascii=False).encode('utf-8'),
                ContentType=self.CONTENT_TYPE
        )
        logger.debug(f"S3.put_object({bucket}, {key}) received response: {response}")
        self.stats['s3_objects_written'] += 1

        return {
            'Location': f"https://{bucket}.s3.amazonaws.com/{key}",
            'ETag':     response.get('ETag'),
            'Bucket':   bucket,
            'Key':      key,
        }


    def get_json(self, bucket: str, key: str):
        """
        Read the object from `bucket` by `key` and parse it as JSON.

        Errors are not handled here: a missing object raises `botocore.exceptions.ClientError`
        and malformed content raises `json.JSONDecodeError`.
        """

        response = self.client.get_object(Bucket=bucket, Key=key)
        body = response['Body'].read()
        if isinstance(body, bytes):
            body = body.decode('utf-8')

        logger.debug(f"Response is: {body}")
        self.stats['s3_objects_read'] += 1

        return json.loads(body)


    def get_stats(self):
        return self.stats


    def reset_stats(self):
        self.stats = defaultdict(int)
