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

__all__ = ['Processor', 'LambdaGlobals', 'get_lambda_handler']
__author__ = "tweetpipe contributors"

import boto3
import logging
import os

from importlib import import_module
from collections import defaultdict

from tweetpipe.components.benchmark import benchmark
from tweetpipe.components.config import get_config
from tweetpipe.components.exceptions import ConfigurationError
from tweetpipe.components.helpers import *


logger = logging.getLogger()


class Processor:
    """
    Base class of the tweet Lambdas (:ref:`TweetFlattener` and :ref:`TweetBatchForwarder`).

    The Processor owns its AWS clients. They are registered once during initialization from the
    `init_clients` config and kept as attributes with `_client` suffix (e.g. `self.s3_client`).
    You may also pass ready clients as keyword arguments (e.g. ``Processor(s3_client=my_client)``),
    in which case they are used as is.
    """

    DEFAULT_CONFIG = {}

    aws_region = os.getenv('AWS_REGION', None)


    def __init__(self, custom_config=None, **kwargs):
        """
        Config is merged in order: `DEFAULT_CONFIG`, environment of the function, `custom_config`.
        """

        self.config = recursive_update(self.DEFAULT_CONFIG,
                                       self.get_config(f"{os.environ.get('AWS_LAMBDA_FUNCTION_NAME')}_config") or {})
        self.config = recursive_update(self.config, custom_config or {})
        logger.info(f"Final {self.__class__.__name__} processor config: {self.config}")

        self.validate_config()

        self.stats = defaultdict(int)

        for name, client in kwargs.items():
            if name.endswith('_client') and client is not None:
                setattr(self, name, client)

        self.register_clients(self.config.get('init_clients', []))


    def validate_config(self):
        """
        Check that all the parameters listed in `required_config` are set. Empty strings are valid values.

        :raises ConfigurationError: If any of the required parameters is missing.
        """

        missing = [k for k in self.config.get('required_config', []) if self.config.get(k) is None]
        if missing:
            raise ConfigurationError(f"{self.__class__.__name__} is missing required config: {', '.join(missing)}. "
                                     f"Set the environment variables or pass them in custom_config.")


    @benchmark
    def register_clients(self, clients):
        """
        Create the clients for `clients` services and assign them to self as `<service>_client`.

        If `tweetpipe.components.<service>` has a `<Service>Client` class (e.g. `S3Client`), it is used
        with `<service>_config` from the Processor config. Otherwise a plain `boto3` client is created.
        Clients that are already set (e.g. passed to the constructor) are not re-created.

        :param list clients:    Names of services, e.g. `['S3', 'sqs']`.
        """

        for service in clients:
            name = camel_case_to_underscore(service)
            attr = f"{name}_client"

            if getattr(self, attr, None) is not None:
                logger.debug(f"{attr} is already registered. Skipping.")
                continue

            try:
                component = getattr(import_module(f"tweetpipe.components.{name}"), f"{service}Client")
            except (ImportError, AttributeError):
                component = None

            if component:
                setattr(self, attr, component(config=self.config.get(f"{name}_config")))
            else:
                try:
                    setattr(self, attr, boto3.client(name, region_name=self.aws_region))
                except Exception as err:
                    raise RuntimeError(f"Failed to create client for service {name}: {err}")

            logger.info(f"Registered {attr}: {type(getattr(self, attr)).__name__}")


    def __call__(self, event):
        """
        Call the Processor. Children do their work and call super() at the end.
        """

        self.stats['processor_calls'] += 1


    @staticmethod
    def get_config(name):
        """
        Returns config by name. Override this to provide your config handling method.

        :param name: Name of the config
        :rtype: dict
        """

        return get_config(name)


    def _components(self):
        """ Registered clients that keep their own stats (e.g. `S3Client`). Plain boto3 clients don't. """

        return [getattr(self, x) for x in dir(self)
                if x.endswith('_client') and callable(getattr(getattr(self, x), 'get_stats', None))]


    def get_stats(self):
        """
        Return counters of the current invocation merged with the counters of components.

        :rtype:     dict
        """

        for component in self._components():
            self.stats.update(component.get_stats())

        return self.stats


    def reset_stats(self):
        """
        Start counting a new invocation. Numeric counters are added to their `total_` versions,
        which live as long as the Processor (i.e. the warm Lambda container).
        """

        totals = defaultdict(int)
        for k, v in self.get_stats().items():
            if k.startswith('total_'):
                totals[k] += v
            elif isinstance(v, (int, float)):
                totals[f"total_{k}"] += v

        self.stats = totals

        for component in self._components():
            component.reset_stats()


class LambdaGlobals:
    """
    Placeholder for the Processor that we want to preserve in the lifetime of the Lambda Container.
    Initialise it at the root level of the Lambda module, so that warm invocations reuse the Processor.
    """

    processor = None


def get_lambda_handler(processor_class, global_vars=None, custom_config=None):
    """
    Return a reference to the entry point of the lambda function.

    :param processor_class:  Callable processor class.
    :param global_vars:      Instance of `LambdaGlobals` created at the root level of the Lambda.
    :param custom_config:    Custom configuration to pass the processor constructor.
    :return: Function reference for the lambda handler.
    """

    if global_vars is None:
        global_vars = LambdaGlobals()


    def lambda_handler(event, context):
        """
        Entry point for the lambda function.

        :param event:           Lambda function event. A list of tweets or an SQS event dict.
        :param object context:  Lambda function context.
        :return: Result of the lambda function call.
        """

        if isinstance(event, dict) and event.get('logging_level'):
            logger.setLevel(event.get('logging_level'))

        logger.info(f"Called {os.environ.get('AWS_LAMBDA_FUNCTION_NAME')} lambda of "
                    f"version {os.environ.get('AWS_LAMBDA_FUNCTION_VERSION')}, event: {event}, context: {context}")

        if global_vars.processor is None:
            global_vars.processor = processor_class(custom_config=custom_config)

        processor = global_vars.processor
        try:
            result = processor(event)
            logger.info(result)
            return result
        finally:
            # Stats are per invocation, also for the failed ones.
            logger.info(processor.get_stats())
            processor.reset_stats()


    return lambda_handler
