from docshare.domain.entities.profile import ProfileEntity
from docshare.domain.services.profile_search_service import ProfileSearchService as PSS


def _profile(pid: str, email: str, first: str = "", last: str = "") -> ProfileEntity:
    return ProfileEntity(id=pid, email=email, first_name=first, last_name=last)


def test_filters_are_case_insensitive_substrings():
    p = _profile("1", "Alice@Example.com", "Alice", "Smith")
    assert PSS.matches(p, email="alice")
    assert PSS.matches(p, first_name="LIC", last_name="smi")
    assert not PSS.matches(p, email="alice", last_name="jones")


def test_empty_filters_match_everything():
    assert PSS.matches(_profile("1", ""))


def test_orders_by_email_then_id():
    profiles = [
        _profile("b", "bob@x.com"),
        _profile("z", "alice@x.com"),
        _profile("a", "ALICE@x.com"),
        _profile("c", "Alice2@x.com"),
    ]
    out = PSS.filter_and_sort(profiles)
    assert [p.id for p in out] == ["c", "a", "z", "b"]


def test_filter_and_sort_applies_all_filters():
    profiles = [
        _profile("1", "alice@x.com", "Alice", "Smith"),
        _profile("2", "alicia@x.com", "Alicia", "Jones"),
    ]
    out = PSS.filter_and_sort(profiles, email="ali", last_name="jon")
    assert [p.id for p in out] == ["2"]
