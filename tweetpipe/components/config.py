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

Config manager component. Has methods for getting configuration for lambdas.

The tweet Lambdas are configured only with environment variables of the function.
`EnvironmentConfig` maps the known variables to the lower-case keys used in `Processor.config`.
Variables that are not set are skipped, so the defaults or the custom config of the Processor stay in force.
"""

__all__ = ['EnvironmentConfig', 'get_config']
__author__ = "tweetpipe contributors"
__version__ = "1.0"

import logging
import os


logger = logging.getLogger()


class EnvironmentConfig:
    """
    Read the configuration of the Lambda from environment variables.

    :param dict variables:  Optional mapping of `ENV_VARIABLE` -> `config_key` to use instead of `VARIABLES`.
    """

    VARIABLES = {
        'TWEET_BUCKET':           'tweet_bucket',
        'TWEET_BUCKET_PREFIX':    'tweet_bucket_prefix',
        'TWEET_QUEUE':            'tweet_queue',
        'TWEET_SENTIMENT_LAMBDA': 'tweet_sentiment_lambda',
    }


    def __init__(self, variables=None):

        self.variables = dict(variables or self.VARIABLES)


    def get_config(self, name=None):
        """
        Collect the config from environment variables.

        :param str name:    Name of the config. Only used for logging, the environment is shared by the function.
        :rtype:             dict
        :return:            Config with values of the variables that are set.
        """

        config = {}
        for variable, key in self.variables.items():
            value = os.environ.get(variable)
            if value is not None:
                config[key] = value

        logger.debug(f"Loaded {name or 'default'} config from environment: {config}")
        return config


__config_source = EnvironmentConfig()

get_config = __config_source.get_config
