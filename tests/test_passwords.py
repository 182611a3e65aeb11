from neuroblog.services.passwords import hash_password, verify_and_upgrade


def test_round_trip():
    h = hash_password("secret123")
    assert h != "secret123"
    assert verify_and_upgrade("secret123", h) == (True, None)


def test_wrong_password():
    ok, new_hash = verify_and_upgrade("nope", hash_password("secret123"))
    assert not ok
    assert new_hash is None


def test_missing_hash():
    assert verify_and_upgrade("secret123", "") == (False, None)
