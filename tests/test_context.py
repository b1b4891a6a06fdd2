"""Tests for the shared Context object."""

import pytest

from middleware import Context, ContextLike


@pytest.mark.unit
class TestContext:
    def test_satisfies_protocol(self):
        assert isinstance(Context(), ContextLike)

    def test_initial_data(self):
        ctx = Context({"a": 1}, b=2)
        assert dict(ctx) == {"a": 1, "b": 2}
        assert len(ctx) == 2

    def test_get_and_set_data(self):
        ctx = Context()
        ctx.set_data("user", "alice")
        assert ctx.get_data("user") == "alice"
        assert ctx.get_data("missing") is None

    def test_set_datas_merges(self):
        ctx = Context(a=1, b=2)
        ctx.set_datas({"b": 20, "c": 30})
        assert ctx.to_dict() == {"a": 1, "b": 20, "c": 30}

    def test_item_access(self):
        ctx = Context()
        ctx["k"] = "v"
        assert ctx["k"] == "v"
        assert "k" in ctx
        del ctx["k"]
        assert "k" not in ctx
        with pytest.raises(KeyError):
            ctx["k"]

    def test_non_string_keys(self):
        ctx = Context()
        key = ("tuple", 1)
        ctx.set_data(key, "value")
        assert ctx[key] == "value"

    def test_attribute_access(self):
        ctx = Context()
        ctx.request_id = 42
        assert ctx["request_id"] == 42
        assert ctx.request_id == 42
        assert ctx.missing is None

    def test_attribute_delete(self):
        ctx = Context(x=1)
        del ctx.x
        assert "x" not in ctx
        with pytest.raises(AttributeError):
            del ctx.x

    def test_private_names_are_not_stored(self):
        ctx = Context()
        with pytest.raises(AttributeError):
            ctx._hidden
        ctx._hidden = 1
        assert "_hidden" not in ctx

    def test_mapping_helpers(self):
        ctx = Context(a=1)
        assert ctx.get("a") == 1
        assert ctx.get("b", "default") == "default"
        ctx.update(b=2)
        assert sorted(ctx.keys()) == ["a", "b"]

    def test_repr(self):
        assert repr(Context(a=1)) == "Context({'a': 1})"
