import pytest

from tapntrack.auth.local_provider import StoreAuthProvider
from tapntrack.core.constants import CREDENTIALS
from tapntrack.core.exceptions import AccountExistsError, AuthenticationError, RecordNotFoundError


@pytest.fixture
def provider(store):
    return StoreAuthProvider(store)


def test_create_account_hashes_password_and_signs_in(store, provider):
    uid = provider.create_account("New@School.test", "secret1")

    cred = store.get(CREDENTIALS, uid)
    assert cred["email"] == "new@school.test"
    assert cred["passwordHash"] != "secret1"
    assert provider.current_uid() == uid


def test_duplicate_email(provider):
    provider.create_account("a@school.test", "secret1")

    with pytest.raises(AccountExistsError):
        provider.create_account("A@school.test", "other12")


def test_sign_in_and_out(provider):
    uid = provider.create_account("a@school.test", "secret1")
    provider.sign_out()

    assert provider.current_uid() is None
    assert provider.sign_in("a@school.test", "secret1") == uid
    with pytest.raises(AuthenticationError):
        provider.sign_in("a@school.test", "wrong-password")
    with pytest.raises(AuthenticationError):
        provider.sign_in("nobody@school.test", "secret1")


def test_update_password_targets_given_account(provider):
    uid = provider.create_account("a@school.test", "secret1")
    provider.update_password(uid, "secret2")
    provider.sign_out()

    assert provider.sign_in("a@school.test", "secret2") == uid
    with pytest.raises(RecordNotFoundError):
        provider.update_password("ghost", "secret3")


def test_password_change_ignores_sign_in_from_another_request(provider):
    alice = provider.create_account("alice@school.test", "alicepw")
    provider.create_account("bob@school.test", "bobpw1")

    verified = provider.reauthenticate("alice@school.test", "alicepw")
    provider.sign_in("bob@school.test", "bobpw1")
    provider.update_password(verified, "newpass")

    assert verified == alice
    assert provider.sign_in("alice@school.test", "newpass") == alice
    assert provider.sign_in("bob@school.test", "bobpw1")
    with pytest.raises(AuthenticationError):
        provider.sign_in("bob@school.test", "newpass")
    with pytest.raises(AuthenticationError):
        provider.sign_in("alice@school.test", "alicepw")


def test_password_reset_token_is_single_use(store):
    sent = {}
    provider = StoreAuthProvider(store, token_sink=lambda email, token: sent.update({email: token}))
    provider.create_account("a@school.test", "secret1")

    provider.send_password_reset("a@school.test")
    token = sent["a@school.test"]
    provider.confirm_password_reset(token, "brand-new")

    assert provider.sign_in("a@school.test", "brand-new")
    with pytest.raises(AuthenticationError):
        provider.confirm_password_reset(token, "again-new")


def test_password_reset_for_unknown_email(provider):
    with pytest.raises(AuthenticationError, match="Email not found"):
        provider.send_password_reset("nobody@school.test")
