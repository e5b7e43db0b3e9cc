"""
Funções para normalizar dados digitados pelo usuário no formulário.
"""
import re
import unicodedata


# Siglas das UFs brasileiras
UF_MAP = {
    "AC": "Acre", "AL": "Alagoas", "AP": "Amapá", "AM": "Amazonas",
    "BA": "Bahia", "CE": "Ceará", "DF": "Distrito Federal",
    "ES": "Espírito Santo", "GO": "Goiás", "MA": "Maranhão",
    "MT": "Mato Grosso", "MS": "Mato Grosso do Sul", "MG": "Minas Gerais",
    "PA": "Pará", "PB": "Paraíba", "PR": "Paraná", "PE": "Pernambuco",
    "PI": "Piauí", "RJ": "Rio de Janeiro", "RN": "Rio Grande do Norte",
    "RS": "Rio Grande do Sul", "RO": "Rondônia", "RR": "Roraima",
    "SC": "Santa Catarina", "SP": "São Paulo", "SE": "Sergipe",
    "TO": "Tocantins",
}


def strip_accents(text: str) -> str:
    """
    Remove acentos de uma string.
    """
    return "".join(
        ch for ch in unicodedata.normalize("NFD", text)
        if unicodedata.category(ch) != "Mn"
    )


def digits_only(raw: str) -> str:
    """
    Remove tudo que não é dígito (0-9).

    Exemplos:
        "(11) 91234-5678" → "11912345678"
        "01001-000" → "01001000"
    """
    return re.sub(r"[^0-9]", "", raw or "")


def format_phone_number(raw: str) -> str:
    """
    Aplica a máscara (XX) XXXXX-XXXX progressivamente, conforme o usuário digita.

    Exemplos:
        "11" → "(11"
        "1191234" → "(11) 91234"
        "11912345678" → "(11) 91234-5678"
    """
    cleaned = digits_only(raw)
    if not cleaned:
        return ""
    if len(cleaned) <= 2:
        return f"({cleaned}"
    if len(cleaned) <= 7:
        return f"({cleaned[:2]}) {cleaned[2:]}"
    return f"({cleaned[:2]}) {cleaned[2:7]}-{cleaned[7:11]}"


def format_postal_code(raw: str) -> str:
    """
    Formata CEP como 00000-000 (apenas para exibição).
    """
    cleaned = digits_only(raw)
    if len(cleaned) != 8:
        return cleaned
    return f"{cleaned[:5]}-{cleaned[5:]}"


def normalize_state(raw: str) -> str:
    """
    Normaliza a UF digitada: sem acentos e em maiúsculas.
    """
    return strip_accents(raw or "").upper()
