from bicgen.completion import (
    CompoundAccess,
    create_matches,
    is_compound_access,
    match_prefix,
    split_compound_access,
)


def test_is_compound_access():
    assert is_compound_access("foo.bar")
    assert is_compound_access("p->x")
    assert is_compound_access("foo.")
    assert not is_compound_access("foo")
    assert not is_compound_access("a")
    assert not is_compound_access(".a")


def test_split_dot_access():
    access = split_compound_access("foo.ba")
    assert access == CompoundAccess("foo", ".", "ba", False)


def test_split_arrow_access():
    access = split_compound_access("ptr->me")
    assert access.obj_expr == "ptr"
    assert access.access_operator == "->"
    assert access.member_prefix == "me"
    assert access.needs_deref is True


def test_split_uses_rightmost_operator():
    access = split_compound_access("a.b->c")
    assert access.obj_expr == "a.b"
    assert access.member_prefix == "c"


def test_split_without_operator():
    assert split_compound_access("plain") is None


def test_object_expression_dot():
    assert split_compound_access("foo.x").object_expression() == "foo;"


def test_object_expression_deref():
    assert split_compound_access("p->x").object_expression() == "*(p);"


def test_full_expressions_filters_by_prefix():
    access = split_compound_access("s.b")
    assert access.full_expressions(["a", "bar", "baz", "cb"]) == ["s.bar", "s.baz"]


def test_match_prefix():
    assert match_prefix(["main", "malloc", "free"], "ma") == ["main", "malloc"]
    assert match_prefix(["x"], "") == ["x"]
    assert match_prefix(["x"], "y") == []


def test_create_matches_none():
    assert create_matches("zz", []) == []


def test_create_matches_single():
    assert create_matches("ma", ["main"]) == ["main"]


def test_create_matches_multiple():
    result = create_matches("ma", ["main", "malloc"])
    assert result == ["ma", "main", "malloc"]
    assert len(result) == 3