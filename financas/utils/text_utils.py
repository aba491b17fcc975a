# financas/utils/text_utils.py
import math
import unicodedata


def strip_accents(s: str) -> str:
    """Remove acentos: "Crédito" -> "Credito", "Débito" -> "Debito"."""
    if not s:
        return ""
    normalized = unicodedata.normalize("NFKD", s)
    return "".join(ch for ch in normalized if not unicodedata.combining(ch))


def normalize_name(s: str) -> str:
    """Normaliza nomes digitados (categorias, responsáveis): espaços extras fora, primeira letra maiúscula.
    Ex: "  mercado  " -> "Mercado"
    Ex: "contas de casa" -> "Contas de casa" (não mexe no resto da frase)
    """
    if not s:
        return ""
    cleaned = " ".join(s.split())
    return cleaned[:1].upper() + cleaned[1:]


def format_currency(value: float) -> str:
    """Formata em reais no padrão pt-BR: 1234.5 -> "R$ 1.234,50"."""
    formatted = f"{abs(value):,.2f}".replace(",", "X").replace(".", ",").replace("X", ".")
    sign = "-" if value < 0 else ""
    return f"{sign}R$ {formatted}"


def parse_amount(text: str) -> float:
    """
    Converte valores digitados pelo usuário em float.
    Aceita "80", "80.5", "80,50", "1.234,56" e "R$ 1.234,56".
    Levanta ValueError para texto que não é número ou valor não positivo.
    """
    cleaned = text.strip().replace("R$", "").replace(" ", "")
    if not cleaned:
        raise ValueError("Valor vazio")
    if "," in cleaned:
        # Formato brasileiro: ponto é separador de milhar
        cleaned = cleaned.replace(".", "").replace(",", ".")
    value = float(cleaned)
    # float() aceita "nan" e "inf"
    if not math.isfinite(value):
        raise ValueError(f"Valor inválido: '{text}'")
    if value <= 0:
        raise ValueError(f"Valor deve ser positivo: '{text}'")
    return value


def starts_with_ignore_case(text: str, prefix: str) -> bool:
    if not text or not prefix:
        return False
    return text.lower().startswith(prefix.lower())
