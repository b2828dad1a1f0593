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

Static helper methods which you can use in any Lambdas.
Must be completely independent with no specific requirements.
"""

__all__ = ['camel_case_to_underscore',
           'recursive_update',
           'make_tweet_key',
           'get_sqs_message_bodies',
           'get_storage_key_from_body',
           ]

import collections.abc
import json
import re

from copy import deepcopy
from typing import Dict, List, Mapping


def camel_case_to_underscore(name):
    """
    Converts attribute to string and formats it as underscored.

    :param name:    - str   -   CamelCase string (or something convertable to CamelCase with __str__() method.
    :return:        - str   -   underscore_formatted_value
    """

    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', str(name))
    return re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()


def recursive_update(d: Dict, u: Mapping) -> Dict:
    """
    Recursively updates the dictionary `d` with another one `u`.
    Values of `u` overwrite in case of type conflict.

    List, set and tuple values of `d` and `u` are merged, preserving only unique values. Returned as List.
    """

    new = deepcopy(d)

    for k, v in u.items():
        if isinstance(v, collections.abc.Mapping) and isinstance(d.get(k), (collections.abc.Mapping, type(None))):
            new[k] = recursive_update(d.get(k, {}), v)

        elif isinstance(v, (set, list, tuple)):
            if isinstance(d.get(k), (set, list, tuple)):
                nv = list(d[k]) + [x for x in v if x not in d[k]]
                new[k] = nv
            else:
                new[k] = v
        else:
            new[k] = v

    return new


def make_tweet_key(prefix: str, tweet_id) -> str:
    """
    Construct the S3 key for a single stored tweet: ``{prefix}/{tweet_id}.tweet.json``

    >>> make_tweet_key('tweets', 1)
    'tweets/1.tweet.json'
    """

    return f"{prefix}/{tweet_id}.tweet.json"


def get_sqs_message_bodies(event: Dict) -> List[str]:
    """
    Extract raw bodies of SQS records from the Lambda event. Order of records is preserved.

    :param dict event: Lambda SQS event (payload) with `Records`.
    :rtype: list
    :raises KeyError: If the event doesn't have `Records` or some record doesn't have a `body`.
    """

    return [record['body'] for record in event['Records']]


def get_storage_key_from_body(body: str) -> str:
    """
    Get the S3 key of a stored tweet from the body of a queue message.

    The body is either the key itself, or the JSON-serialised result of the upload
    (``{"Location": ..., "ETag": ..., "Bucket": ..., "Key": ...}``) as published by the Flattener.
    """

    try:
        data = json.loads(body)
    except (TypeError, ValueError):
        return body

    if isinstance(data, dict) and data.get('Key'):
        return data['Key']

    # JSON-encoded string
    if isinstance(data, str):
        return data

    return body
