from enum import Enum
from dataclasses import dataclass
from typing import Dict


class FormField(str, Enum):
    """
    Campos do formulário de cadastro.
    O valor de cada membro é o nome do atributo em FormRecord.
    """
    NAME = "name"
    AGE = "age"
    ROLE = "role"
    PHONE = "phone"
    EMAIL = "email"
    POSTAL_CODE = "postal_code"
    STREET = "street"
    NEIGHBORHOOD = "neighborhood"
    NUMBER = "number"
    COMPLEMENT = "complement"
    CITY = "city"
    STATE = "state"


class SubmissionState(str, Enum):
    """
    Estados do envio do formulário: idle → submitting → idle.
    """
    IDLE = "idle"
    SUBMITTING = "submitting"


# Campos que recebem mensagem de erro própria
VALIDATED_FIELDS = (
    FormField.NAME,
    FormField.AGE,
    FormField.ROLE,
    FormField.PHONE,
    FormField.EMAIL,
    FormField.POSTAL_CODE,
    FormField.NUMBER,
    FormField.CITY,
    FormField.STATE,
)

# Campos de endereço preenchidos apenas pela busca de CEP
LOOKUP_FIELDS = (
    FormField.STREET,
    FormField.NEIGHBORHOOD,
    FormField.CITY,
    FormField.STATE,
)

FieldErrorMap = Dict[FormField, str]


@dataclass
class FormRecord:
    """
    Dados digitados no formulário durante uma sessão de cadastro.
    Todos os valores são strings, exatamente como digitados.
    """
    name: str = ""
    age: str = ""
    role: str = ""
    phone: str = ""
    email: str = ""
    postal_code: str = ""
    street: str = ""
    neighborhood: str = ""
    number: str = ""
    complement: str = ""
    city: str = ""
    state: str = ""

    def get(self, field: FormField) -> str:
        return getattr(self, field.value)

    def set(self, field: FormField, value: str) -> None:
        setattr(self, field.value, value)


def empty_field_errors() -> FieldErrorMap:
    return {field: "" for field in VALIDATED_FIELDS}
