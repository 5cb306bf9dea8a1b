from unittest.mock import Mock

import pytest

from webfetcher.services.fetcher import HttpTransport


def test_fetch_delegates_to_http_service():
    http_service = Mock()
    transport = HttpTransport(http_service)

    transport.fetch("http://x/a", "http://x")

    http_service.fetch.assert_called_once_with("http://x/a", "http://x")


def test_rendered_source_without_renderer_raises():
    with pytest.raises(RuntimeError, match="no renderer"):
        HttpTransport(Mock()).rendered_source("http://x")


def test_rendered_source_uses_renderer():
    renderer = Mock()
    renderer.rendered_source.return_value = "<html/>"
    transport = HttpTransport(Mock(), renderer)

    assert transport.rendered_source("http://x") == "<html/>"


def test_close_releases_everything_once():
    http_service = Mock()
    renderer = Mock()
    transport = HttpTransport(http_service, renderer)

    transport.close()
    transport.close()

    http_service.close.assert_called_once()
    renderer.close.assert_called_once()


def test_renderer_closed_even_if_http_close_fails():
    http_service = Mock()
    http_service.close.side_effect = OSError("socket")
    renderer = Mock()

    with pytest.raises(OSError):
        HttpTransport(http_service, renderer).close()

    renderer.close.assert_called_once()
