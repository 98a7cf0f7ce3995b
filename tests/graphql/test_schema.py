"""Tests for schema assembly and its extensions."""

from __future__ import annotations

import warnings
from types import SimpleNamespace

import pytest
from strawberry.extensions import AddValidationRules, MaskErrors, QueryDepthLimiter, SchemaExtension

from storefront.features.graphql import extensions
from storefront.features.graphql.schema import create_schema


@pytest.fixture
def introspection_off(monkeypatch):
    settings = SimpleNamespace(max_query_depth=4, introspection_enabled=False)
    monkeypatch.setattr(extensions, "get_graphql_settings", lambda: settings)


def test_factories_build_a_fresh_extension_per_call():
    factories = extensions.get_extensions()

    built = [factory() for factory in factories]
    rebuilt = [factory() for factory in factories]

    assert all(isinstance(extension, SchemaExtension) for extension in built)
    assert [type(extension) for extension in built][:2] == [QueryDepthLimiter, MaskErrors]
    assert all(a is not b for a, b in zip(built, rebuilt, strict=True))


def test_schema_is_built_without_extension_instance_warnings():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        create_schema()

    assert not [w for w in caught if "extension instance" in str(w.message)]


@pytest.mark.usefixtures("introspection_off")
def test_disabled_introspection_adds_validation_rule():
    factories = extensions.get_extensions()

    assert len(factories) == 3
    assert isinstance(factories[-1](), AddValidationRules)


@pytest.mark.usefixtures("introspection_off")
async def test_introspection_query_is_rejected_when_disabled():
    schema = create_schema()

    result = await schema.execute("query { __schema { queryType { name } } }")

    assert result.errors
    assert result.data is None
