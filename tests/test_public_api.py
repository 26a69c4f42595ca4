"""Tests for the lazy top-level ``wren`` namespace."""

import pytest

import wren


class TestLazyExports:
    @pytest.mark.parametrize("name", wren.__all__)
    def test_every_export_resolves(self, name: str) -> None:
        assert getattr(wren, name) is not None

    def test_same_objects_as_submodules(self) -> None:
        from wren.app import App
        from wren.routing.route import Route

        assert wren.App is App
        assert wren.Route is Route

    def test_unknown_attribute(self) -> None:
        with pytest.raises(AttributeError, match="no_such_thing"):
            wren.no_such_thing  # noqa: B018
