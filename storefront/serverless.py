"""
Serverless Entry Adapter

Bridges a serverless host's WSGI invocation into the Flask application.

Flow for each invocation:
1. Resolve the application once per execution context (cached on the adapter),
   building it from ``create_app`` with the explicit HostedConfig
2. Validate its shape: a plain WSGI callable, or an object exposing a callable
   ``wsgi_app`` / ``handle`` member
3. Invoke it and wait for the response to complete: the body iterable is
   drained (finish) and closed (close) before anything goes back to the host
4. Convert every loading/invocation failure into a JSON 500. The only failure
   that reaches the host is an error raised while the body is streamed.
"""

import importlib
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Union
from werkzeug.wrappers import Response
from .config import HostedConfig

logger = logging.getLogger(__name__)

DEFAULT_APP_MODULE = 'storefront'
HANDLER_MEMBERS = ('wsgi_app', 'handle')


class ConfigurationError(Exception):
    """The loaded application is not an invocable request handler."""
    pass


class ResponseStreamError(Exception):
    """The application failed while its response body was being written."""
    pass


@dataclass(frozen=True)
class DirectHandler:
    """The loaded value is itself a WSGI callable."""
    target: Callable

    def invoke(self, environ, start_response):
        return self.target(environ, start_response)


@dataclass(frozen=True)
class WrappedHandler:
    """The loaded value carries the WSGI callable as a named member."""
    wrapper: Any
    member: str

    def invoke(self, environ, start_response):
        return getattr(self.wrapper, self.member)(environ, start_response)


Handler = Union[DirectHandler, WrappedHandler]


def resolve_handler(value):
    """
    Tags the loaded value with the way it is invoked.

    Raises:
        ConfigurationError: If the value is neither variant
    """
    if value is None or isinstance(value, (str, bytes)):
        raise ConfigurationError(f"Loaded application is {type(value).__name__}")

    if callable(value):
        return DirectHandler(value)

    for member in HANDLER_MEMBERS:
        if callable(getattr(value, member, None)):
            return WrappedHandler(value, member)

    raise ConfigurationError(
        f"Loaded application of type {type(value).__name__} is not callable "
        f"and exposes none of {', '.join(HANDLER_MEMBERS)}"
    )


def load_application(module_name, config_class):
    """
    Imports ``module_name`` and returns the application it provides.

    A module exposing a ``create_app`` factory gets the configuration passed in.
    Otherwise its ``app`` attribute is used, or the module itself when it has none.
    """
    module = importlib.import_module(module_name)

    factory = getattr(module, 'create_app', None)
    if callable(factory):
        return factory(config_class)

    return getattr(module, 'app', module)


def _json_response(status, body):
    return Response(json.dumps(body), status=status, mimetype='application/json')


class ServerlessAdapter:
    """
    WSGI entry point for the serverless host.

    Usage (api/index.py):
        app = ServerlessAdapter()
    """

    def __init__(self, module_name=DEFAULT_APP_MODULE, config_class=HostedConfig, loader=load_application):
        self.module_name = module_name
        self.config_class = config_class
        self.loader = loader
        self._handler = None

    def load(self):
        """Returns the validated handler, loading it on first use."""
        if self._handler is None:
            value = self.loader(self.module_name, self.config_class)
            self._handler = resolve_handler(value)
        return self._handler

    def __call__(self, environ, start_response):
        try:
            handler = self.load()
        except ConfigurationError as e:
            logger.error(f"App is not valid: {str(e)}")
            response = _json_response(500, {
                "error": "Server configuration error",
                "message": "Application not properly exported",
            })
            return response(environ, start_response)
        except Exception:
            logger.exception("Serverless function error while loading the application")
            return self._internal_error(environ, start_response)

        try:
            status, headers, body = self._complete(handler, environ)
        except ResponseStreamError:
            raise
        except Exception:
            logger.exception("Serverless function error")
            return self._internal_error(environ, start_response)

        start_response(status, headers)
        return [body]

    def _complete(self, handler, environ):
        """
        Runs the application until its response signals finish or close.

        Returns:
            tuple: (status, headers, body bytes)

        Raises:
            ResponseStreamError: If iterating the body fails (error event)
        """
        started = {}
        chunks = []

        def capture_start_response(status, headers, exc_info=None):
            if exc_info and started:
                raise exc_info[1].with_traceback(exc_info[2])
            started['status'] = status
            started['headers'] = list(headers)
            return chunks.append

        result = handler.invoke(environ, capture_start_response)
        try:
            for chunk in result:
                chunks.append(chunk)
        except Exception as e:
            raise ResponseStreamError(f"Response stream failed: {str(e)}") from e
        finally:
            close = getattr(result, 'close', None)
            if close is not None:
                close()

        if 'status' not in started:
            raise RuntimeError("Application completed without starting a response")

        return started['status'], started['headers'], b''.join(chunks)

    @staticmethod
    def _internal_error(environ, start_response):
        response = _json_response(500, {
            "error": "Internal server error",
            "message": "Serverless function failed to process request",
        })
        return response(environ, start_response)
