from datetime import timedelta

from studycards.core.security import create_access_token, decode_access_token, hash_password, verify_password


def test_password_hash_round_trip():
    hashed = hash_password("Secret123!")

    assert hashed != "Secret123!"
    assert verify_password("Secret123!", hashed)
    assert not verify_password("secret123!", hashed)


def test_access_token_carries_user_id():
    token = create_access_token("123e4567-e89b-12d3-a456-426614174000")

    assert decode_access_token(token) == "123e4567-e89b-12d3-a456-426614174000"


def test_expired_or_garbage_tokens_are_rejected():
    expired = create_access_token("someone", timedelta(minutes=-1))

    assert decode_access_token(expired) is None
    assert decode_access_token("not.a.token") is None
