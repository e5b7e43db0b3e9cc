from __future__ import annotations

import pytest

from cadastro.core.form_state import FormField
from cadastro.core.validators import (
    validate_age,
    validate_email,
    validate_field,
    validate_name,
    validate_number,
    validate_phone,
    validate_postal_code,
    validate_state,
)


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", "Nome é obrigatório"),
        ("   ", "Nome é obrigatório"),
        ("Al", "Nome deve ter pelo menos 3 caracteres"),
        ("Ana2", "Nome deve conter apenas letras"),
        ("Ana_Paula", "Nome deve conter apenas letras"),
        ("José Antônio", ""),
        ("Ana", ""),
    ],
)
def test_validate_name(value, expected):
    assert validate_name(value) == expected


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", "Idade é obrigatória"),
        ("abc", "Idade deve ser um número"),
        ("1_8", "Idade deve ser um número"),
        ("+30", "Idade deve ser um número"),
        (" 30 ", "Idade deve ser um número"),
        ("３０", "Idade deve ser um número"),
        ("-20", "Idade deve ser um número"),
        ("17", "Idade mínima é 18 anos"),
        ("18", ""),
        ("120", ""),
        ("121", "Idade inválida"),
    ],
)
def test_validate_age(value, expected):
    assert validate_age(value) == expected


def test_validate_phone_counts_digits():
    assert validate_phone("") == "Telefone é obrigatório"
    assert validate_phone("119123") == "Telefone deve ter entre 10 e 11 dígitos"
    assert validate_phone("1133334444") == ""
    assert validate_phone("(11) 91234-5678") == ""
    assert validate_phone("119123456789") == "Telefone deve ter entre 10 e 11 dígitos"


def test_validate_email():
    assert validate_email("") == "Email é obrigatório"
    assert validate_email("maria@x") == "Email inválido"
    assert validate_email("maria x@y.com") == "Email inválido"
    assert validate_email("maria@x.com\n") == "Email inválido"
    assert validate_email("maria@x.com") == ""


@pytest.mark.parametrize(
    "value, expected",
    [
        ("", "CEP é obrigatório"),
        ("0100100", "CEP deve ter 8 dígitos"),
        ("0100100a", "CEP deve conter apenas números"),
        ("01001000", ""),
    ],
)
def test_validate_postal_code(value, expected):
    assert validate_postal_code(value) == expected


def test_validate_number_accepts_digits_or_no_number():
    assert validate_number("") == "Número é obrigatório"
    assert validate_number("100") == ""
    assert validate_number("S/N") == ""
    assert validate_number("10A") == "Número deve conter apenas dígitos ou S/N"


def test_validate_state_requires_known_uf():
    assert validate_state("") == "Estado é obrigatório"
    assert validate_state("SAO") == "Use a sigla do estado (2 letras)"
    assert validate_state("XX") == "Sigla de estado inválida"
    assert validate_state("SP") == ""
    assert validate_state("rj") == ""


def test_validate_field_dispatches_and_ignores_unvalidated_fields():
    assert validate_field(FormField.CITY, "") == "Cidade é obrigatória"
    assert validate_field(FormField.ROLE, "A") == "Cargo deve ter pelo menos 2 caracteres"
    assert validate_field(FormField.STREET, "") == ""
    assert validate_field(FormField.COMPLEMENT, "") == ""
