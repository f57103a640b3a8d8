import re

# Разделители токенов имени: пробел, дефис, табуляция
_DELIMITERS = re.compile(r"[ \t-]+")
MAX_INITIALS = 2


def _upper(char: str) -> str:
    upper = char.upper()
    # "ß".upper() == "SS": оставляем символ как есть, чтобы не превысить длину
    return upper if len(upper) == 1 else char


def extract_initials(name: str | None) -> str:
    """
    Возвращает до двух заглавных инициалов из имени.

    Имя разбивается по пробелам, дефисам и табуляциям, пустые фрагменты
    отбрасываются, из первых двух берется первая буква.
    """
    if name is None:
        return ""
    tokens = [token for token in _DELIMITERS.split(name) if token]
    return "".join(_upper(token[0]) for token in tokens[:MAX_INITIALS])
