from __future__ import annotations

import asyncio

import pytest

from cadastro.core.auth_controller import AuthController
from cadastro.core.errors import AuthError, AuthErrorCode

from conftest import FakeIdentity


@pytest.fixture
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture
def controller(identity) -> AuthController:
    return AuthController(identity, min_password_length=6, success_clear_delay=0.01)


@pytest.mark.parametrize(
    "email, password, expected",
    [
        ("", "segredo", "Por favor, informe seu email"),
        ("maria", "segredo", "Por favor, informe um email válido"),
        ("maria@x.com", "", "Por favor, informe sua senha"),
    ],
)
@pytest.mark.asyncio
async def test_login_validates_inputs_before_calling_provider(controller, identity, email, password, expected):
    controller.email = email
    controller.password = password

    assert await controller.login() is None
    assert controller.error == expected
    assert identity.sign_in_calls == []


@pytest.mark.asyncio
async def test_login_success(controller, identity):
    controller.email = " maria@x.com "
    controller.password = "segredo"

    user = await controller.login()

    assert user is not None
    assert identity.sign_in_calls == [("maria@x.com", "segredo")]
    assert controller.error == ""
    assert controller.submitting is False


@pytest.mark.asyncio
async def test_login_sends_email_without_trailing_newline(controller, identity):
    controller.email = "maria@x.com\n"
    controller.password = "segredo"

    await controller.login()

    assert identity.sign_in_calls == [("maria@x.com", "segredo")]


@pytest.mark.asyncio
async def test_login_rejects_email_with_inner_newline(controller, identity):
    controller.email = "maria@x.com\nfoo"
    controller.password = "segredo"

    assert await controller.login() is None
    assert controller.error == "Por favor, informe um email válido"
    assert identity.sign_in_calls == []


@pytest.mark.parametrize(
    "code, message",
    [
        (AuthErrorCode.WRONG_PASSWORD, "Email ou senha incorretos"),
        (AuthErrorCode.USER_NOT_FOUND, "Email ou senha incorretos"),
        (AuthErrorCode.INVALID_CREDENTIAL, "Email ou senha incorretos"),
        (AuthErrorCode.NETWORK_REQUEST_FAILED, "Erro de conexão. Verifique sua internet."),
        (AuthErrorCode.TOO_MANY_REQUESTS, "Ocorreu um erro. Tente novamente."),
    ],
)
@pytest.mark.asyncio
async def test_login_failure_maps_error_code(controller, identity, code, message):
    identity.sign_in_error = AuthError(code)
    controller.email = "maria@x.com"
    controller.password = "segredo"

    assert await controller.login() is None
    assert controller.error == message


@pytest.mark.asyncio
async def test_short_password_only_rejected_when_creating_account(controller, identity):
    controller.email = "maria@x.com"
    controller.password = "123"

    await controller.login()
    assert identity.sign_in_calls == [("maria@x.com", "123")]

    controller.toggle_mode()
    assert await controller.create_account() is None
    assert controller.error == "A senha deve ter no mínimo 6 caracteres"
    assert identity.create_calls == []


@pytest.mark.asyncio
async def test_create_account_sets_success_and_clears_it_later(controller, identity):
    controller.toggle_mode()
    controller.email = "novo@x.com"
    controller.password = "segredo"

    dispose = await controller.create_account()

    assert dispose is not None
    assert identity.create_calls == [("novo@x.com", "segredo")]
    assert controller.success == "Conta criada com sucesso!"
    await asyncio.sleep(0.05)
    assert controller.success == ""


@pytest.mark.asyncio
async def test_create_account_disposer_keeps_message(controller):
    controller.toggle_mode()
    controller.email = "novo@x.com"
    controller.password = "segredo"

    dispose = await controller.create_account()
    dispose()
    await asyncio.sleep(0.05)

    assert controller.success == "Conta criada com sucesso!"


@pytest.mark.asyncio
async def test_create_account_email_in_use(controller, identity):
    identity.create_error = AuthError(AuthErrorCode.EMAIL_ALREADY_IN_USE)
    controller.toggle_mode()
    controller.email = "maria@x.com"
    controller.password = "segredo"

    assert await controller.create_account() is None
    assert controller.error == "Este email já está sendo utilizado"
    assert controller.success == ""


def test_toggle_mode_clears_messages(controller):
    controller.error = "erro"
    controller.success = "ok"
    controller.toggle_mode()
    assert controller.login_mode is False
    assert controller.error == ""
    assert controller.success == ""

