import secrets
import string

from tablebook.core.config import config

CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_confirmation_code(prefix: str = None, length: int = None) -> str:
    prefix = config.CONFIRMATION_PREFIX if prefix is None else prefix
    length = length or config.CONFIRMATION_LENGTH
    return prefix + "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))
