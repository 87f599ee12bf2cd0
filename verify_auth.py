from unittest.mock import MagicMock, patch
import bcrypt
import pytest
import auth
import storage


def test_hash_and_verify_password():
    hashed = auth.hash_password("s3cret", rounds=4)

    assert hashed.startswith("$2b$04$")
    assert auth.verify_password("s3cret", hashed)
    assert not auth.verify_password("wrong", hashed)
    assert not auth.verify_password("s3cret", "garbage")


def test_login_with_2a_hash_from_existing_users_file(data_dir):
    legacy = bcrypt.hashpw(b"pass1", bcrypt.gensalt(rounds=4, prefix=b"2a")).decode("ascii")
    assert legacy.startswith("$2a$04$")
    storage.save_users([{"username": "alice", "passwordHash": legacy}])

    assert auth.verify_password("pass1", legacy)
    assert auth.login_user("alice", "pass1") == "alice"
    with pytest.raises(auth.AuthError, match="Invalid password"):
        auth.login_user("alice", "pass2")


def test_password_over_bcrypt_byte_limit_rejected(data_dir):
    with pytest.raises(auth.AuthError):
        auth.register_user("bob", "é" * 40)


def test_register_and_login(data_dir):
    assert auth.register_user("alice", "pass1") == "alice"

    [user] = storage.load_users()
    assert user["username"] == "alice"
    assert user["passwordHash"] != "pass1"
    assert auth.login_user("alice", "pass1") == "alice"


def test_register_rejects_duplicates_and_bad_input(data_dir):
    auth.register_user("alice", "pass1")

    for username, password in [("alice", "pass2"), ("al", "pass1"), ("bad name", "pass1"), ("bob", "abc"), ("bob", "x" * 51)]:
        with pytest.raises(auth.AuthError):
            auth.register_user(username, password)
    assert len(storage.load_users()) == 1


def test_login_failures(data_dir):
    auth.register_user("alice", "pass1")

    with pytest.raises(auth.AuthError, match="User not found"):
        auth.login_user("nobody", "pass1")
    with pytest.raises(auth.AuthError, match="Invalid password"):
        auth.login_user("alice", "nope")


def test_authenticate_exit_returns_none(data_dir):
    with patch.object(auth.Prompt, "ask", MagicMock(return_value="3")):
        assert auth.authenticate(MagicMock()) is None


def test_authenticate_retries_until_login(data_dir):
    auth.register_user("alice", "pass1")
    answers = ["1", "alice", "wrong", "1", "alice", "pass1"]
    console = MagicMock()

    with patch.object(auth.Prompt, "ask", MagicMock(side_effect=answers)):
        assert auth.authenticate(console) == "alice"

    printed = " ".join(str(c.args[0]) for c in console.print.call_args_list if c.args)
    assert "Invalid password" in printed


def test_authenticate_creates_account(data_dir):
    with patch.object(auth.Prompt, "ask", MagicMock(side_effect=["2", "newbie", "pass1"])):
        assert auth.authenticate(MagicMock()) == "newbie"
    assert auth.login_user("newbie", "pass1") == "newbie"


if __name__ == "__main__":
    pytest.main([__file__])
