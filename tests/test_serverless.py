import json
import sys
import types

import pytest
from werkzeug.test import Client

from storefront.config import HostedConfig
from storefront.serverless import (
    ConfigurationError,
    DirectHandler,
    ResponseStreamError,
    ServerlessAdapter,
    WrappedHandler,
    load_application,
    resolve_handler,
)

from conftest import HostedTestConfig

CONFIG_ERROR = {"error": "Server configuration error", "message": "Application not properly exported"}
INTERNAL_ERROR = {"error": "Internal server error", "message": "Serverless function failed to process request"}


def hello_app(environ, start_response):
    start_response('200 OK', [('Content-Type', 'text/plain')])
    return [b'hello']


class ClosingBody:
    def __init__(self, chunks, fail=False):
        self.chunks = chunks
        self.fail = fail
        self.closed = False

    def __iter__(self):
        for chunk in self.chunks:
            yield chunk
        if self.fail:
            raise IOError("client went away")

    def close(self):
        self.closed = True


def _adapter_for(value):
    calls = []

    def loader(module_name, config_class):
        calls.append((module_name, config_class))
        return value

    return ServerlessAdapter(loader=loader), calls


def _json(response):
    return json.loads(response.get_data(as_text=True))


# --- resolve_handler ---

def test_plain_callable_is_direct():
    assert resolve_handler(hello_app) == DirectHandler(hello_app)


@pytest.mark.parametrize('member', ['wsgi_app', 'handle'])
def test_wrapper_with_callable_member(member):
    wrapper = types.SimpleNamespace(**{member: hello_app})

    handler = resolve_handler(wrapper)

    assert isinstance(handler, WrappedHandler)
    assert handler.member == member


@pytest.mark.parametrize('value', [None, 'storefront', b'app', 42, types.SimpleNamespace(wsgi_app='not callable')])
def test_invalid_values_are_rejected(value):
    with pytest.raises(ConfigurationError):
        resolve_handler(value)


# --- load_application ---

def test_loader_passes_config_to_factory():
    app = load_application('storefront', HostedTestConfig)

    assert app.config['HOSTED'] is True
    assert app.config['APP_ENV'] == 'production'


def test_loader_uses_exported_app(monkeypatch):
    module = types.ModuleType('exported_wsgi_module')
    module.app = hello_app
    monkeypatch.setitem(sys.modules, 'exported_wsgi_module', module)

    assert load_application('exported_wsgi_module', HostedConfig) is hello_app


# --- Adapter ---

def test_adapter_serves_real_app_in_fallback_mode():
    client = Client(ServerlessAdapter(config_class=HostedTestConfig))

    response = client.get('/api/products')

    assert response.status_code == 200
    body = _json(response)
    assert body["source"] == "fallback"
    assert body["count"] == 6


def test_adapter_serves_not_found_body():
    client = Client(ServerlessAdapter(config_class=HostedTestConfig))

    response = client.get('/api/missing')

    assert response.status_code == 404
    assert _json(response) == {"error": "Route not found"}


def test_wrapped_handler_is_invoked():
    adapter, _ = _adapter_for(types.SimpleNamespace(handle=hello_app))

    response = Client(adapter).get('/')

    assert response.status_code == 200
    assert response.get_data() == b'hello'


def test_invalid_export_returns_configuration_error():
    adapter, calls = _adapter_for(object())
    client = Client(adapter)

    response = client.get('/api/health')

    assert response.status_code == 500
    assert _json(response) == CONFIG_ERROR

    # Nothing is cached, so every invocation retries the load.
    client.get('/api/health')
    assert len(calls) == 2


def test_valid_handler_is_loaded_once():
    adapter, calls = _adapter_for(hello_app)
    client = Client(adapter)

    client.get('/')
    client.get('/')

    assert calls == [('storefront', HostedConfig)]


def test_response_is_closed_before_returning():
    body = ClosingBody([b'a', b'b'])

    def app(environ, start_response):
        start_response('201 Created', [('X-Test', '1')])
        return body

    adapter, _ = _adapter_for(app)
    response = Client(adapter).get('/')

    assert response.status_code == 201
    assert response.headers['X-Test'] == '1'
    assert response.get_data() == b'ab'
    assert body.closed


def test_stream_failure_reaches_host():
    body = ClosingBody([b'partial'], fail=True)

    def app(environ, start_response):
        start_response('200 OK', [])
        return body

    adapter, _ = _adapter_for(app)

    with pytest.raises(ResponseStreamError):
        Client(adapter).get('/')
    assert body.closed


def test_synchronous_failure_becomes_internal_error():
    def app(environ, start_response):
        raise RuntimeError("boom")

    adapter, _ = _adapter_for(app)
    response = Client(adapter).get('/')

    assert response.status_code == 500
    assert _json(response) == INTERNAL_ERROR


def test_app_that_never_starts_a_response_is_an_internal_error():
    adapter, _ = _adapter_for(lambda environ, start_response: [])

    response = Client(adapter).get('/')

    assert response.status_code == 500
    assert _json(response) == INTERNAL_ERROR


def test_import_failure_becomes_internal_error():
    adapter = ServerlessAdapter(module_name='storefront_no_such_module')

    response = Client(adapter).get('/api/health')

    assert response.status_code == 500
    assert _json(response) == INTERNAL_ERROR
