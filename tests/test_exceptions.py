"""Tests for the exception hierarchy."""

import inspect

import core.exceptions
from core.exceptions import InternalFailure, InvalidURL, MissingParameter, ProxyError, UpstreamUnreachable


def test_hierarchy_holds_only_raised_errors():
    classes = {
        obj
        for _, obj in inspect.getmembers(core.exceptions, inspect.isclass)
        if obj.__module__ == core.exceptions.__name__
    }
    assert classes == {ProxyError, MissingParameter, InvalidURL, UpstreamUnreachable, InternalFailure}
    assert all(issubclass(cls, ProxyError) for cls in classes)


def test_upstream_unreachable_attributes():
    error = UpstreamUnreachable("boom", url="https://a.com/", host_not_found=True)
    assert str(error) == "boom"
    assert error.url == "https://a.com/"
    assert error.host_not_found
