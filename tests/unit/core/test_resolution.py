"""Tests for effective permission resolution."""


class TestGetPermissions:
    """Test get_permissions."""

    def test_union_of_memberships(self, rbac):
        """Test group and direct permissions are combined."""
        rbac.add_group("g1", ["a"]).add_group("g2", ["b"])
        rbac.add_role("r", ["c"], ["g1", "g2"])

        assert rbac.get_permissions("r") == {"a", "b", "c"}

    def test_unknown_role_is_empty(self, rbac):
        """Test unknown roles resolve to an empty set."""
        assert rbac.get_permissions("nobody") == set()

    def test_result_is_a_snapshot(self, rbac):
        """Test mutating the returned set does not affect the store."""
        rbac.add_group("g", ["a"]).add_role("r", ["b"], ["g"])

        resolved = rbac.get_permissions("r")
        resolved.add("injected")
        resolved.discard("a")

        assert rbac.get_permissions("r") == {"a", "b"}

    def test_resolution_reflects_later_group_changes(self, rbac):
        """Test resolution is recomputed after group mutations."""
        rbac.add_group("g", ["a"]).add_role("r", [], ["g"])
        assert rbac.has_permission("r", "a")

        rbac.add_group("g", ["b"])
        assert rbac.has_permission("r", "b")

        rbac.remove_group_permissions("g", ["a"])
        assert not rbac.has_permission("r", "a")

    def test_direct_and_group_permission_overlap(self, rbac):
        """Test removing a group permission keeps the direct grant."""
        rbac.add_group("g", ["a"]).add_role("r", ["a"], ["g"])
        rbac.remove_group_permissions("g", ["a"])

        assert rbac.has_permission("r", "a")


class TestHasPermission:
    """Test exact-match permission checks."""

    def test_blog_scenario(self, blog_rbac):
        """Test the admin/editor/user setup."""
        assert blog_rbac.has_permission("admin", "*:*")
        assert not blog_rbac.has_permission("editor", "article:*")
        assert blog_rbac.has_permission("editor", "article:update")
        assert not blog_rbac.has_permission("user", "article:update")

    def test_no_wildcard_expansion(self, rbac):
        """Test wildcard-looking permissions match only themselves."""
        rbac.add_group("admins", ["article:*"]).add_role("admins", [], ["admins"])

        assert not rbac.has_permission("admins", "article:read")
        assert rbac.has_permission("admins", "article:*")

    def test_no_normalization(self, rbac):
        """Test permissions are compared exactly."""
        rbac.add_role("r", ["Article:Read"])

        assert not rbac.has_permission("r", "article:read")
        assert not rbac.has_permission("r", "Article:Read ")
        assert rbac.has_permission("r", "Article:Read")


class TestHasSomePermission:
    """Test OR-based checks."""

    def test_any_match(self, blog_rbac):
        """Test a single matching permission is enough."""
        assert blog_rbac.has_some_permission("user", ["*:*", "article:*", "article:read"])
        assert blog_rbac.has_some_permission("admin", ["*:*", "article:*", "article:read"])

    def test_no_match(self, blog_rbac):
        """Test no match yields False."""
        assert not blog_rbac.has_some_permission("user", ["article:update", "article:delete"])

    def test_empty_list(self, blog_rbac):
        """Test an empty query yields False."""
        assert not blog_rbac.has_some_permission("admin", [])

    def test_unknown_role(self, blog_rbac):
        """Test an unknown role has none of the permissions."""
        assert not blog_rbac.has_some_permission("ghost", ["*:*"])


class TestHasAllPermissions:
    """Test AND-based checks."""

    def test_all_present(self, blog_rbac):
        """Test every queried permission is held."""
        assert blog_rbac.has_all_permissions("editor", ["article:read", "article:update"])

    def test_one_missing(self, blog_rbac):
        """Test a single missing permission fails the check."""
        assert not blog_rbac.has_all_permissions("user", ["article:read", "article:update"])

    def test_empty_list(self, blog_rbac):
        """Test an empty query is vacuously true."""
        assert blog_rbac.has_all_permissions("user", [])
