from listapp.tags import ancestors, descendants, expand_wildcard, matches

UNIVERSE = {"work", "work/a", "work/b", "work/a/c", "home", "workshop/x"}


def test_expand_wildcard_single_level():
    assert expand_wildcard("work/*", {"work/a", "work/b", "work/a/c"}) == {"work/a", "work/b"}


def test_expand_without_wildcard_is_exact():
    assert expand_wildcard("work/a", UNIVERSE) == {"work/a"}
    assert expand_wildcard("work/z", UNIVERSE) == set()


def test_expand_escapes_regex_characters():
    assert expand_wildcard("a.b/*", {"a.b/c", "axb/c"}) == {"a.b/c"}


def test_wildcard_in_middle_and_prefix():
    assert expand_wildcard("*/a", UNIVERSE) == {"work/a"}
    assert expand_wildcard("work*", UNIVERSE) == {"work"}


def test_descendants():
    assert descendants("work", UNIVERSE) == {"work/a", "work/b", "work/a/c"}
    assert descendants("work/a/", UNIVERSE) == {"work/a/c"}


def test_ancestors():
    assert ancestors("work/backend/api") == ["work", "work/backend", "work/backend/api"]
    assert ancestors("home") == ["home"]


def test_matches():
    assert matches("work/a", "work/*")
    assert not matches("work/a/c", "work/*")
    assert matches("home", "home")
    assert not matches("home", "hom")
