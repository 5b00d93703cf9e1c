"""BRL amount rendering for contracts: ``R$ 1.400,00`` and ``Mil e quatrocentos reais``."""

from decimal import ROUND_HALF_UP, Decimal

from bookings.domain.value_objects import CENTS, Money

UNITS = ("", "um", "dois", "três", "quatro", "cinco", "seis", "sete", "oito", "nove")
TEENS = (
    "dez", "onze", "doze", "treze", "quatorze",
    "quinze", "dezesseis", "dezessete", "dezoito", "dezenove",
)
TENS = (
    "", "", "vinte", "trinta", "quarenta",
    "cinquenta", "sessenta", "setenta", "oitenta", "noventa",
)
HUNDREDS = (
    "", "cento", "duzentos", "trezentos", "quatrocentos",
    "quinhentos", "seiscentos", "setecentos", "oitocentos", "novecentos",
)
SCALES = (
    (10**9, "bilhão", "bilhões"),
    (10**6, "milhão", "milhões"),
    (10**3, "mil", "mil"),
)
LIMIT = 10**12


def _below_thousand(n: int) -> str:
    if n == 100:
        return "cem"
    parts = []
    hundreds, rest = divmod(n, 100)
    if hundreds:
        parts.append(HUNDREDS[hundreds])
    if 10 <= rest < 20:
        parts.append(TEENS[rest - 10])
    else:
        tens, units = divmod(rest, 10)
        if tens:
            parts.append(TENS[tens])
        if units:
            parts.append(UNITS[units])
    return " e ".join(parts)


def integer_in_words(n: int) -> str:
    if n == 0:
        return "zero"
    if n < 0 or n >= LIMIT:
        raise ValueError("Amount out of range")
    chunks: list[tuple[int, str]] = []
    remaining = n
    for size, singular, plural in SCALES:
        count, remaining = divmod(remaining, size)
        if not count:
            continue
        if size == 1000:
            words = "mil" if count == 1 else f"{_below_thousand(count)} mil"
        else:
            words = f"{_below_thousand(count)} {singular if count == 1 else plural}"
        chunks.append((count, words))
    if remaining:
        chunks.append((remaining, _below_thousand(remaining)))

    text = chunks[0][1]
    for index, (value, words) in enumerate(chunks[1:], start=1):
        is_last = index == len(chunks) - 1
        joiner = " e " if is_last and (value < 100 or value % 100 == 0) else " "
        text = f"{text}{joiner}{words}"
    return text


def amount_in_words(money: Money) -> str:
    """Spell out a BRL amount, capitalised."""
    cents_total = int(money.amount.quantize(CENTS, rounding=ROUND_HALF_UP) * 100)
    reais, cents = divmod(cents_total, 100)

    parts = []
    if reais:
        currency = "real" if reais == 1 else "reais"
        if reais >= 10**6 and reais % 10**6 == 0:
            currency = "de reais"
        parts.append(f"{integer_in_words(reais)} {currency}")
    if cents:
        parts.append(f"{integer_in_words(cents)} {'centavo' if cents == 1 else 'centavos'}")
    text = " e ".join(parts) if parts else "zero reais"
    return text[0].upper() + text[1:]


def format_brl(money: Money) -> str:
    """``R$ 1.400,00``"""
    amount: Decimal = money.amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    grouped = f"{amount:,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"R$ {grouped}"
