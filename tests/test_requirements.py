"""Tests for scopes and permission requirement maps."""

import itertools

import pytest

from permlint.engine.requirements import Permission, PermissionMap
from permlint.engine.scope import CATEGORIES, Scope
from permlint.parser.workflow_parser import Position


ALL_SCOPES = [Scope.NONE, Scope.READ, Scope.WRITE]


# ---------------------------------------------------------------------------
# Scope
# ---------------------------------------------------------------------------

class TestScope:
    def test_order(self):
        assert Scope.NONE < Scope.READ < Scope.WRITE

    def test_order_is_total_and_transitive(self):
        for a, b, c in itertools.product(ALL_SCOPES, repeat=3):
            assert (a < b) or (a == b) or (a > b)
            if a <= b and b <= c:
                assert a <= c

    @pytest.mark.parametrize("token", ["none", "read", "write"])
    def test_round_trip(self, token):
        assert str(Scope.parse(token)) == token

    def test_format_uses_token(self):
        assert f"{Scope.WRITE}" == "write"

    @pytest.mark.parametrize("token", ["admin", "Read", "", None, "write-all"])
    def test_invalid_token(self, token):
        with pytest.raises(ValueError):
            Scope.parse(token)

    def test_categories(self):
        assert len(CATEGORIES) == 13
        assert "contents" in CATEGORIES
        assert "id-token" in CATEGORIES


# ---------------------------------------------------------------------------
# PermissionMap
# ---------------------------------------------------------------------------

class TestPermissionMap:
    def test_empty(self):
        m = PermissionMap()
        assert m.is_empty()
        assert len(m) == 0

    def test_add_inserts(self):
        m = PermissionMap()
        m.add("contents", "actions/checkout", Scope.READ, Position(3, 9))
        assert not m.is_empty()
        assert m["contents"] == Permission("contents", Scope.READ, "actions/checkout", Position(3, 9))

    @pytest.mark.parametrize("a,b", list(itertools.product(ALL_SCOPES, repeat=2)))
    def test_strongest_scope_wins(self, a, b):
        m = PermissionMap()
        m.add("issues", "first/action", a)
        m.add("issues", "second/action", b)
        assert m["issues"].scope == max(a, b)
        expected = "first/action" if a >= b else "second/action"
        assert m["issues"].provenance == expected

    def test_tie_keeps_first_position(self):
        m = PermissionMap()
        m.add("contents", "a/one", Scope.READ, Position(1, 1))
        m.add("contents", "a/two", Scope.READ, Position(9, 9))
        assert m["contents"].position == Position(1, 1)

    def test_add_is_idempotent(self):
        m = PermissionMap()
        m.add("pages", "actions/deploy-pages", Scope.WRITE)
        snapshot = list(m)
        m.add("pages", "actions/deploy-pages", Scope.WRITE)
        assert list(m) == snapshot
        assert len(m) == 1

    def test_iteration_in_insertion_order(self):
        m = PermissionMap()
        m.add("issues", "", Scope.WRITE)
        m.add("contents", "", Scope.READ)
        assert m.categories() == ["issues", "contents"]
        assert [p.category for p in m] == ["issues", "contents"]

    def test_get_missing(self):
        assert PermissionMap().get("contents") is None
        assert "contents" not in PermissionMap()


class TestPermissionStr:
    def test_with_provenance(self):
        p = Permission("contents", Scope.WRITE, "softprops/action-gh-release")
        assert str(p) == "write (required by softprops/action-gh-release)"

    def test_without_provenance(self):
        assert str(Permission("issues", Scope.READ)) == "read"
