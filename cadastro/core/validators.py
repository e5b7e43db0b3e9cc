"""
Validação dos campos do formulário de cadastro.

Cada regra é uma função pura: recebe o valor digitado e devolve a mensagem
de erro ou "" quando o valor é válido. `validate_field` despacha pelo campo,
tanto para a validação em tempo real quanto para a validação completa antes
do envio.
"""
import re
from typing import Callable, Dict

from .form_state import FormField, VALIDATED_FIELDS
from .normalizers import UF_MAP, digits_only

# Letras (inclusive acentuadas) e espaços
NAME_PATTERN = re.compile(r"(?:[^\W\d_]| )+")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
DIGITS_PATTERN = re.compile(r"[0-9]+")

MIN_AGE = 18
MAX_AGE = 120
NO_NUMBER = "S/N"

REQUIRED_FIELDS = VALIDATED_FIELDS


def validate_name(value: str) -> str:
    if not value.strip():
        return "Nome é obrigatório"
    if len(value.strip()) < 3:
        return "Nome deve ter pelo menos 3 caracteres"
    if not NAME_PATTERN.fullmatch(value):
        return "Nome deve conter apenas letras"
    return ""


def validate_age(value: str) -> str:
    if not value:
        return "Idade é obrigatória"
    if not DIGITS_PATTERN.fullmatch(value):
        return "Idade deve ser um número"
    age = int(value)
    if age < MIN_AGE:
        return "Idade mínima é 18 anos"
    if age > MAX_AGE:
        return "Idade inválida"
    return ""


def validate_role(value: str) -> str:
    if not value.strip():
        return "Cargo é obrigatório"
    if len(value.strip()) < 2:
        return "Cargo deve ter pelo menos 2 caracteres"
    return ""


def validate_phone(value: str) -> str:
    if not value.strip():
        return "Telefone é obrigatório"
    if len(digits_only(value)) not in (10, 11):
        return "Telefone deve ter entre 10 e 11 dígitos"
    return ""


def validate_email(value: str) -> str:
    if not value.strip():
        return "Email é obrigatório"
    if not EMAIL_PATTERN.fullmatch(value):
        return "Email inválido"
    return ""


def validate_postal_code(value: str) -> str:
    if not value:
        return "CEP é obrigatório"
    if len(value) != 8:
        return "CEP deve ter 8 dígitos"
    if not DIGITS_PATTERN.fullmatch(value):
        return "CEP deve conter apenas números"
    return ""


def validate_number(value: str) -> str:
    if not value.strip():
        return "Número é obrigatório"
    if value != NO_NUMBER and not DIGITS_PATTERN.fullmatch(value):
        return "Número deve conter apenas dígitos ou S/N"
    return ""


def validate_city(value: str) -> str:
    if not value.strip():
        return "Cidade é obrigatória"
    return ""


def validate_state(value: str) -> str:
    if not value.strip():
        return "Estado é obrigatório"
    if len(value.strip()) != 2:
        return "Use a sigla do estado (2 letras)"
    if value.strip().upper() not in UF_MAP:
        return "Sigla de estado inválida"
    return ""


VALIDATORS: Dict[FormField, Callable[[str], str]] = {
    FormField.NAME: validate_name,
    FormField.AGE: validate_age,
    FormField.ROLE: validate_role,
    FormField.PHONE: validate_phone,
    FormField.EMAIL: validate_email,
    FormField.POSTAL_CODE: validate_postal_code,
    FormField.NUMBER: validate_number,
    FormField.CITY: validate_city,
    FormField.STATE: validate_state,
}


def validate_field(field: FormField, value: str) -> str:
    """
    Valida um único campo. Campos sem regra própria (rua, bairro,
    complemento) são sempre válidos.
    """
    validator = VALIDATORS.get(field)
    if validator is None:
        return ""
    return validator(value or "")
